"""CLI interface for content-assist using Typer.

Main entry point for the application. Handles command definitions,
argument parsing, and Rich console output.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape as escape_markup
from rich.table import Table

from .ai import AssistClient
from .cache import TranslationCache
from .config import (
    ConfigError,
    get_client_config,
    get_meta_path,
    get_options_path,
    get_site_config,
    load_settings,
)
from .credentials import CredentialStore, mask_key, sanitize_text_field
from .errors import ProviderError
from .features import AltTextFeature, SummaryFeature, TranslationFeature, build_registry
from .languages import AUTO_DETECT, SUPPORTED_LANGUAGES
from .logging import setup_logging
from .models import AltTextResult, Confidence
from .storage import JsonMetaStore, JsonOptionStore
from .utils import copy_to_clipboard, format_output, print_error, print_success, print_warning


app = typer.Typer(
    name="content-assist",
    help="Generate alt text, summaries and translations with the OpenAI API",
    add_completion=False,
)
console = Console()

# Set by the app callback before any command runs
_settings_path: Optional[Path] = None


@app.callback()
def main_options(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level: DEBUG|INFO|WARNING|ERROR",
    ),
    settings: Optional[Path] = typer.Option(
        None,
        "--settings",
        help="Path to settings.json",
    ),
) -> None:
    """Generate alt text, summaries and translations with the OpenAI API."""
    global _settings_path
    _settings_path = settings
    setup_logging(log_level)


def credential_store() -> CredentialStore:
    return CredentialStore(JsonOptionStore(get_options_path()))


def build_client() -> tuple[AssistClient, JsonMetaStore]:
    """Create a client backed by the on-disk stores.

    Returns:
        (client, meta store)
    """
    settings = load_settings(_settings_path)
    meta = JsonMetaStore(get_meta_path())
    client = AssistClient(
        credential_store(),
        TranslationCache(meta),
        config=get_client_config(settings),
        site=get_site_config(settings),
    )
    return client, meta


def read_text_input(path: Optional[Path], text: Optional[str]) -> str:
    """Read content from a file if given, else use the inline text.

    Exits with an error if the file can't be read as UTF-8 text.
    """
    if path is None:
        return text or ""

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        print_error(f"Not UTF-8 text: {path}")
        raise typer.Exit(1)
    except OSError as e:
        print_error(f"Could not read {path}: {e.strerror or e}")
        raise typer.Exit(1)


@app.command("set-key")
def set_key(
    api_key: str = typer.Argument(
        ...,
        help="OpenAI API key",
    ),
) -> None:
    """Save the OpenAI API key."""
    api_key = sanitize_text_field(api_key)
    if not api_key:
        print_error("API key is empty")
        raise typer.Exit(1)

    store = credential_store()

    if store.set(api_key):
        print_success("API key saved")
    else:
        console.print("[dim]API key unchanged[/dim]")


@app.command("clear-key")
def clear_key() -> None:
    """Remove the stored API key."""
    if credential_store().clear():
        print_success("API key removed")
    else:
        console.print("[yellow]No API key configured[/yellow]")


@app.command()
def auth() -> None:
    """Check the API key and test the OpenAI connection."""
    try:
        client, _ = build_client()
        api_key = client.credentials.get()

        if not api_key:
            print_warning("OpenAI API key not configured (run 'content-assist set-key')")
            raise typer.Exit(1)

        console.print(f"[green]✓[/green] API key configured: {mask_key(api_key)}")

        with console.status("[bold green]Testing OpenAI connection..."):
            client.test_connection()

        print_success("Connection successful! Your API key is working correctly.")
        console.print(f"  Endpoint: {client.config.base_url}")

    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)
    except ProviderError as e:
        print_error(f"Connection error: {e}")
        raise typer.Exit(1)


@app.command("alt-text")
def alt_text(
    image_url: str = typer.Argument(
        ...,
        help="URL of the image to describe",
    ),
    context: str = typer.Option(
        "",
        "--context",
        "-c",
        help="Context about the image, e.g. its title",
    ),
    attachment_id: int = typer.Option(
        0,
        "--attachment-id",
        "-a",
        help="Store the alt text on this attachment",
        min=0,
    ),
    output_format: str = typer.Option(
        "plain",
        "--output-format",
        "-o",
        help="Output format: plain|markdown|html",
    ),
    copy: bool = typer.Option(
        False,
        "--copy",
        help="Copy the result to the clipboard",
    ),
) -> None:
    """Generate alt text for an image."""
    try:
        client, meta = build_client()
        registry = build_registry(client, meta)

        with console.status("[bold green]Generating alt text..."):
            data = registry.execute(
                AltTextFeature.HANDLER,
                {"image_url": image_url, "context": context, "attachment_id": attachment_id},
            )

        result = AltTextResult(alt_text=data["alt_text"], confidence=Confidence(data["confidence"]))
        output = format_output(result, image_url, output_format)
        console.print(escape_markup(output), highlight=False)

        if attachment_id:
            console.print(f"[dim]Saved to attachment {attachment_id}[/dim]")

        if copy and copy_to_clipboard(output):
            console.print("\n[dim]Copied to clipboard[/dim]")

    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)
    except ProviderError as e:
        print_error(f"Alt text failed: {e}")
        raise typer.Exit(1)


@app.command()
def summarize(
    file: Optional[Path] = typer.Argument(
        None,
        help="File with the content to summarize (text or HTML)",
        exists=True,
        dir_okay=False,
    ),
    text: Optional[str] = typer.Option(
        None,
        "--text",
        "-t",
        help="Content to summarize, instead of a file",
    ),
    max_words: int = typer.Option(
        50,
        "--max-words",
        "-w",
        help="Approximate summary length in words",
        min=10,
        max=200,
    ),
    copy: bool = typer.Option(
        False,
        "--copy",
        help="Copy the summary to the clipboard",
    ),
) -> None:
    """Summarize a file or a piece of text."""
    content = read_text_input(file, text)
    if not content:
        print_error("No content provided (pass a FILE or --text)")
        raise typer.Exit(1)

    try:
        client, meta = build_client()
        registry = build_registry(client, meta)

        with console.status("[bold green]Summarizing..."):
            data = registry.execute(
                SummaryFeature.HANDLER,
                {"content": content, "max_length": max_words},
            )

        console.print(escape_markup(data["summary"]), highlight=False)
        console.print(f"\n[dim]{data['word_count']} words[/dim]")

        if copy and copy_to_clipboard(data["summary"]):
            console.print("[dim]Copied to clipboard[/dim]")

    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)
    except ProviderError as e:
        print_error(f"Summary failed: {e}")
        raise typer.Exit(1)


@app.command()
def translate(
    content_id: str = typer.Argument(
        ...,
        help="ID of the content item (cache key)",
    ),
    lang: str = typer.Option(
        ...,
        "--lang",
        help="Target language code (see 'content-assist languages')",
    ),
    title: str = typer.Option(
        "",
        "--title",
        help="Title to translate",
    ),
    content: Optional[str] = typer.Option(
        None,
        "--content",
        "-c",
        help="Content to translate",
    ),
    content_file: Optional[Path] = typer.Option(
        None,
        "--content-file",
        "-f",
        help="File with the content to translate",
        exists=True,
        dir_okay=False,
    ),
    excerpt: str = typer.Option(
        "",
        "--excerpt",
        help="Excerpt to translate",
    ),
    source_lang: str = typer.Option(
        AUTO_DETECT,
        "--source-lang",
        "-s",
        help="Source language code, or 'auto'",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
) -> None:
    """Translate a content item, reusing a cached translation when present."""
    body = read_text_input(content_file, content)

    try:
        client, meta = build_client()
        registry = build_registry(client, meta)

        with console.status(f"[bold green]Translating to {lang}..."):
            data = registry.execute(
                TranslationFeature.HANDLER,
                {
                    "content_id": content_id,
                    "title": title,
                    "content": body,
                    "excerpt": excerpt,
                    "target_lang": lang,
                    "source_lang": source_lang,
                },
            )

        if as_json:
            console.print_json(json.dumps(data, ensure_ascii=False))
            return

        translation = data["translation"]
        source = "cache" if data["cached"] else "OpenAI"
        translated_at = datetime.fromtimestamp(translation["translated_at"]).strftime("%Y-%m-%d %H:%M")

        for label in ("title", "content", "excerpt"):
            if translation[label]:
                console.print(f"\n[bold]{label.capitalize()}:[/bold]")
                console.print(escape_markup(translation[label]), highlight=False)

        console.print(f"\n[dim]From {source}, translated {translated_at}[/dim]")

    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)
    except ProviderError as e:
        print_error(f"Translation failed: {e}")
        raise typer.Exit(1)


@app.command()
def languages() -> None:
    """List supported translation languages."""
    table = Table(title="Supported Languages")
    table.add_column("Code", style="cyan")
    table.add_column("Language")

    for code, name in SUPPORTED_LANGUAGES.items():
        table.add_row(code, name)

    console.print(table)


@app.command()
def cached(
    content_id: str = typer.Argument(
        ...,
        help="ID of the content item",
    ),
) -> None:
    """Show cached translations for a content item."""
    cache = TranslationCache(JsonMetaStore(get_meta_path()))
    codes = cache.languages(content_id)

    if not codes:
        console.print(f"[yellow]No cached translations for {escape_markup(content_id)}[/yellow]")
        return

    table = Table(title=f"Cached Translations ({escape_markup(content_id)})")
    table.add_column("Language", style="cyan")
    table.add_column("Title")
    table.add_column("Translated", style="dim")

    for code in codes:
        entry = cache.get(content_id, code)
        translated = datetime.fromtimestamp(entry.translated_at).strftime("%Y-%m-%d %H:%M")
        table.add_row(f"{code} ({SUPPORTED_LANGUAGES.get(code, code)})", escape_markup(entry.title), translated)

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
