"""Utility functions for content-assist.

Provides clipboard operations, output formatting, and console messages.
"""

from html import escape

import pyperclip
from rich.console import Console
from rich.markup import escape as escape_markup

from .models import AltTextResult


console = Console()


def copy_to_clipboard(text: str) -> bool:
    """Copy text to system clipboard.

    Args:
        text: Text to copy

    Returns:
        True if successful, False otherwise
    """
    try:
        pyperclip.copy(text)
        return True
    except pyperclip.PyperclipException:
        return False


def format_plain(result: AltTextResult, image_url: str) -> str:
    return result.alt_text


def format_markdown(result: AltTextResult, image_url: str) -> str:
    """Format alt text as Markdown image syntax.

    Args:
        result: Generated alt text
        image_url: Image URL

    Returns:
        ![alt](url)
    """
    alt = result.alt_text.replace('[', '\\[').replace(']', '\\]')
    return f"![{alt}]({image_url})"


def format_html(result: AltTextResult, image_url: str) -> str:
    """Format alt text as an HTML img tag.

    Args:
        result: Generated alt text
        image_url: Image URL

    Returns:
        <img src="url" alt="alt">
    """
    return f'<img src="{escape(image_url)}" alt="{escape(result.alt_text)}">'


def format_output(result: AltTextResult, image_url: str, format_type: str) -> str:
    """Format alt text based on output format setting.

    Args:
        result: Generated alt text
        image_url: Image URL
        format_type: Output format (plain, markdown, html)

    Returns:
        Formatted output string
    """
    formatters = {
        'plain': format_plain,
        'markdown': format_markdown,
        'html': format_html,
    }

    formatter = formatters.get(format_type, format_plain)
    return formatter(result, image_url)


def print_success(message: str) -> None:
    """Print a success message with checkmark.

    Args:
        message: Message to print
    """
    console.print(f"[green]✓[/green] {escape_markup(message)}")


def print_error(message: str) -> None:
    """Print an error message with X mark.

    Args:
        message: Message to print
    """
    console.print(f"[red]✗[/red] {escape_markup(message)}")


def print_warning(message: str) -> None:
    """Print a warning message with exclamation mark.

    Args:
        message: Message to print
    """
    console.print(f"[yellow]![/yellow] {escape_markup(message)}")
