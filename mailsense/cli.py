"""
Mailsense CLI - Analyze email addresses from the command line.

Usage:
    mailsense --help                  Show all commands
    mailsense analyze EMAIL           Full analysis report as JSON
    mailsense analyze EMAIL --dns     Include DNS and MX checks
    mailsense normalize EMAIL...      Normalized and canonical forms
    mailsense suggest EMAIL           Typo suggestions and common mistakes
    mailsense stats FILE              Aggregate statistics for a file of addresses
    mailsense dedupe FILE             Drop alias duplicates from a file
    mailsense export-config           Dump the domain lists and static tables
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer

from mailsense.config import AppConfig, get_settings
from mailsense.core.logging import setup_logging
from mailsense.toolkit import EmailToolkit

app = typer.Typer(
    name="mailsense",
    help="Mailsense CLI - Email address analysis toolkit",
    no_args_is_help=True,
)


def _print_json(data: Any) -> None:
    """Print data as indented JSON on stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(f"❌ {message}", err=True)


def _build_toolkit(dns: bool = False) -> EmailToolkit:
    """Build a toolkit, forcing DNS checks on when requested."""
    settings = get_settings()
    if dns:
        settings = settings.model_copy(update={"dns_enabled": True})
    return EmailToolkit(AppConfig(settings))


def _read_addresses(path: Path) -> list[str]:
    """Read one address per line, skipping blank lines."""
    if not path.exists():
        _print_error(f"File not found: {path}")
        raise typer.Exit(1)

    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    setup_logging()


@app.command()
def analyze(
    email: str = typer.Argument(..., help="Address to analyze"),
    dns: bool = typer.Option(False, "--dns", "-d", help="Check DNS and MX records"),
):
    """Print the full analysis report of one address."""
    toolkit = _build_toolkit(dns)
    report = asyncio.run(toolkit.analyze(email))
    _print_json(report.model_dump(mode="json"))


@app.command()
def normalize(
    emails: list[str] = typer.Argument(..., help="Addresses to normalize"),
):
    """Print the normalized and canonical forms of each address."""
    toolkit = _build_toolkit()
    _print_json(
        [
            {
                "email": email,
                "normalized": toolkit.normalize(email),
                "canonical": toolkit.canonicalize(email),
            }
            for email in emails
        ]
    )


@app.command()
def suggest(
    email: str = typer.Argument(..., help="Possibly misspelled address"),
):
    """Print typo suggestions and detected mistakes."""
    toolkit = _build_toolkit()
    _print_json(
        {
            "email": email,
            "suggestions": toolkit.suggest(email),
            "mistakes": [mistake.value for mistake in toolkit.get_common_mistakes(email)],
        }
    )


@app.command()
def stats(
    file: Path = typer.Argument(..., help="File with one address per line"),
    dns: bool = typer.Option(False, "--dns", "-d", help="Check DNS and MX records"),
):
    """Print aggregate statistics for a list of addresses."""
    emails = _read_addresses(file)
    toolkit = _build_toolkit(dns)
    statistics = asyncio.run(toolkit.get_statistics(emails))
    _print_json(statistics.model_dump(mode="json"))


@app.command()
def dedupe(
    file: Path = typer.Argument(..., help="File with one address per line"),
):
    """Print the addresses of a file with alias duplicates removed."""
    emails = _read_addresses(file)
    toolkit = _build_toolkit()
    for email in toolkit.remove_duplicates(emails):
        typer.echo(email)


@app.command()
def export_config():
    """Print the allow/block lists and static tables as JSON."""
    toolkit = _build_toolkit()
    _print_json(toolkit.export_config())


if __name__ == "__main__":
    app()
