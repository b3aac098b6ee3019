"""
cl-parse CLI - Main application entry point.

This module sets up the Typer CLI application: read a changelog, parse
it (optionally enriching it from git and the hosting provider), narrow
it to the requested releases, and print it as JSON or YAML.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from clparse import __version__
from clparse.core.changelog import (
    ChangelogError,
    ChangelogParser,
    OutputFormat,
    filter_entries,
    render,
    validate_scope_options,
)
from clparse.core.config import ClParseConfig, ConfigError, load_config, load_layered_env
from clparse.core.origin import OriginError

app = typer.Typer(
    name="cl-parse",
    help="Parse conventional markdown changelogs into structured release data",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

err_console = Console(stderr=True)


def configure_logging(debug: bool) -> None:
    """
    Configure logging for a cl-parse run.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _fail(message: str) -> None:
    err_console.print(
        f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True
    )
    raise typer.Exit(1)


def _apply_overrides(
    config: ClParseConfig,
    output_format: OutputFormat | None,
    include_body: bool | None,
    fetch_item_details: bool | None,
    token: str | None,
) -> ClParseConfig:
    """Layer CLI flags that were given on top of the loaded config."""
    overrides = {
        "format": output_format,
        "include_body": include_body,
        "fetch_item_details": fetch_item_details,
        "token": token,
    }
    return config.model_copy(update={k: v for k, v in overrides.items() if v is not None})


@app.command()
def main(
    path: Annotated[
        Path | None,
        typer.Argument(
            help="Path to the changelog (default: ./CHANGELOG.md)",
            show_default=False,
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Display the current version of cl-parse"),
    ] = False,
    latest: Annotated[
        bool,
        typer.Option("--latest", "-l", help="Display the most recent version from the changelog"),
    ] = False,
    release: Annotated[
        str | None,
        typer.Option("--release", "-r", help="Display the changelog entry for a specific release"),
    ] = None,
    last: Annotated[
        int,
        typer.Option("--last", help="Limit output to the N most recent releases"),
    ] = 0,
    since_days: Annotated[
        int,
        typer.Option(
            "--since-days",
            help="Limit output to releases within the last N days (from today, UTC)",
        ),
    ] = 0,
    include_body: Annotated[
        bool | None,
        typer.Option(
            "--include-body/--no-include-body",
            help="Include the full commit body in changelog entries",
            show_default=False,
        ),
    ] = None,
    fetch_item_details: Annotated[
        bool | None,
        typer.Option(
            "--fetch-item-details/--no-fetch-item-details",
            help="Fetch details for related items (e.g. GitHub issues & PRs)",
            show_default=False,
        ),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option("--token", help="Token for fetching related items (or CL_PARSE_TOKEN)"),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format (json, yaml or toml)",
            case_sensitive=False,
            show_default=False,
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug output with detailed logging"),
    ] = False,
) -> None:
    """
    Parse a changelog and print its releases.

    Examples:

        # All releases as JSON
        cl-parse

        # Latest release as YAML
        cl-parse --latest --format yaml

        # One release, with commit bodies and issue details
        cl-parse docs/CHANGELOG.md -r 1.2.0 --include-body --fetch-item-details
    """
    configure_logging(debug)

    if version:
        typer.echo(f"cl-parse v{__version__}")
        raise typer.Exit(0)

    try:
        validate_scope_options(latest=latest, release=release, last=last, since_days=since_days)

        load_layered_env()
        config = _apply_overrides(
            load_config(), output_format, include_body, fetch_item_details, token
        )

        changelog_path = path if path is not None else Path(config.changelog)
        content = changelog_path.read_text(encoding="utf-8")

        parser = ChangelogParser(
            include_body=config.include_body,
            fetch_item_details=config.fetch_item_details,
            token=config.token,
            repo_path=Path.cwd(),
        )
        changelog = parser.parse(content)

        if latest:
            output = render(changelog.get_latest(), config.format)
        elif release:
            output = render(changelog.get_version(release), config.format)
        else:
            output = render(filter_entries(changelog.entries, last, since_days), config.format)
    except (ChangelogError, ConfigError, OriginError) as e:
        _fail(str(e))
        return
    except OSError as e:
        _fail(f"Cannot read changelog: {e}")
        return

    typer.echo(output)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main", "main"]
