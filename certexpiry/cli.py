"""Typer CLI for CertExpiry."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import build_config
from .errors import CertExpiryError
from .models import CheckResult
from .runner import error_result, run_check
from .severity import get_severity_color

app = typer.Typer(
    name="check-cert-expiry",
    help="Check when an SSL certificate will expire",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr so stdout only carries the status line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def print_check_result(result: CheckResult, json_output: bool = False) -> None:
    """Print a check result to the console.

    Args:
        result: Check result to display.
        json_output: If True, output as JSON.
    """
    if json_output:
        console.print_json(result.model_dump_json())
        return

    console.print(
        result.status_line(),
        style=get_severity_color(result.severity),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def version_callback(value: bool) -> None:
    if value:
        console.print(f"CertExpiry v{__version__}", highlight=False)
        raise typer.Exit()


@app.command()
def check_command(
    critical: Annotated[
        Optional[int],
        typer.Option("--critical", "-c", metavar="TIME", help="Time (hours or days) left"),
    ] = None,
    warning: Annotated[
        Optional[int],
        typer.Option("--warning", "-w", metavar="TIME", help="Time (hours or days) left"),
    ] = None,
    pem: Annotated[
        Optional[Path],
        typer.Option("--pem", "-P", help="Path to PEM file"),
    ] = None,
    pkcs12: Annotated[
        Optional[Path],
        typer.Option("--cert", "-C", help="Path to PKCS#12 certificate"),
    ] = None,
    passphrase: Annotated[
        Optional[str],
        typer.Option("--pass", "-S", help="Pass phrase for the private key in PKCS#12 certificate"),
    ] = None,
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to validate"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to validate"),
    ] = None,
    servername: Annotated[
        Optional[str],
        typer.Option("--servername", "-s", help="Set the TLS SNI (Server Name Indication) extension"),
    ] = None,
    hours: Annotated[
        Optional[bool],
        typer.Option(
            "--hours/--days",
            "-H/-D",
            help="Calculate expiry in hours instead of days (default). Useful for short-lived (<24h) ACME certs",
        ),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", help="Connection timeout in seconds"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="YAML file with default option values"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output the result as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug details to stderr"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = False,
) -> None:
    """Check when an SSL certificate will expire.

    The certificate is read from a PEM file (--pem), a PKCS#12 archive
    (--cert with --pass) or a live TLS endpoint (--host with --port).
    """
    setup_logging(verbose)

    try:
        config = build_config(
            config_path,
            critical=critical,
            warning=warning,
            pem=pem,
            pkcs12=pkcs12,
            pkcs12_pass=passphrase,
            host=host,
            port=port,
            servername=servername,
            hours=hours,
            timeout=timeout,
        )
    except CertExpiryError as exc:
        result = error_result(exc)
    else:
        result = run_check(config)

    print_check_result(result, json_output)
    raise typer.Exit(result.exit_code)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
