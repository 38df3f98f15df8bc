"""
SAS Remote Submit CLI - Run one program on a workspace server.

Usage:
  sas-remote submit --username me --secret-file ~/.sas/secret --host sas.example.org \
      --source demo.sas --output-dir ./out

Environment variables (also read from a .env file):
  SASR_USERNAME, SASR_SECRET_FILE, SASR_HOST, SASR_PORT, SASR_OUTPUT_DIR
  SASR_REPORT_INTERVAL, SASR_CHUNK_SIZE, SASR_BACKEND
  SASR_SOURCE_ENCODING
  SASR_JAVA, SASR_SASPY_CFGNAME (IOM backend)
"""

import logging
import os
import sys
from dataclasses import replace

import click
from dotenv import load_dotenv

from sas_remote.cli.console import console
from sas_remote.config import DEFAULT_SUBMIT_OPTIONS, SubmitConfig
from sas_remote.errors import INTERRUPTED_EXIT_CODE, SasRemoteError, ValidationError

# Use "sasr" namespace so logs appear at INFO level
logger = logging.getLogger("sasr.cli.submit")

# Load environment variables from .env file if present
load_dotenv()


def load_config() -> SubmitConfig:
    """Get config from environment, exiting on malformed values."""
    try:
        return SubmitConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Error (validation):[/red] {e}")
        sys.exit(ValidationError.exit_code)


def resolve_submit_options(extra_options, no_default_options: bool) -> tuple:
    base = () if no_default_options else DEFAULT_SUBMIT_OPTIONS
    return tuple(base) + tuple(o.strip() for o in extra_options if o.strip())


@click.command()
@click.option('--username', '-u', help='Account on the workspace server (default: SASR_USERNAME env)')
@click.option('--secret-file', type=str, help='File holding the secret for that account (default: SASR_SECRET_FILE env)')
@click.option('--host', help='Fully-qualified workspace server host (default: SASR_HOST env)')
@click.option('--port', type=int, help='Workspace server port (default: SASR_PORT env or 8591)')
@click.option('--source', '-s', required=True, type=str, help='SAS program to submit')
@click.option('--source-encoding', help='Encoding of the program file (default: SASR_SOURCE_ENCODING env or utf-8)')
@click.option('--output-dir', '-o', type=str, help='Directory for the .log/.lst files (default: SASR_OUTPUT_DIR env)')
@click.option('--report-interval', type=int, help='Seconds between elapsed-time reports (default: 60)')
@click.option('--chunk-size', type=int, help='Lines fetched per drain call (default: 1000)')
@click.option('--backend', help='Session backend (default: SASR_BACKEND env or iom)')
@click.option('--java', 'java_path', help='Java executable for the IOM bridge (default: SASR_JAVA env or java)')
@click.option('--saspy-cfgname', help='saspy configuration to start from (default: SASR_SASPY_CFGNAME env)')
@click.option('--submit-option', 'extra_options', multiple=True, help='Extra statement prepended to the program (repeatable)')
@click.option('--no-default-options', is_flag=True, help='Do not prepend validvarname/pagesize options')
@click.option('--quiet', '-q', is_flag=True, help='Log progress instead of printing elapsed-time lines')
def submit(
    username,
    secret_file,
    host,
    port,
    source,
    source_encoding,
    output_dir,
    report_interval,
    chunk_size,
    backend,
    java_path,
    saspy_cfgname,
    extra_options,
    no_default_options,
    quiet,
):
    """Submit a SAS program, wait for it and save its log and listing.

    Output files are named {source name}__{YYYYmmddHHMMSS}.log / .lst
    inside the output directory.
    """
    from sas_remote.core.progress import ConsoleProgressReporter, LoggingProgressReporter
    from sas_remote.core.supervisor import run_submission
    from sas_remote.core.validation import build_request
    from sas_remote.session.client import RemoteSessionClient
    from sas_remote.session.registry import get_backend_factory

    cfg = load_config()
    cfg = replace(
        cfg,
        port=port if port is not None else cfg.port,
        report_interval_seconds=report_interval if report_interval is not None else cfg.report_interval_seconds,
        chunk_size=chunk_size if chunk_size is not None else cfg.chunk_size,
        backend=backend or cfg.backend,
        java_path=java_path or cfg.java_path,
        saspy_cfgname=saspy_cfgname or cfg.saspy_cfgname,
        source_encoding=source_encoding or cfg.source_encoding,
        submit_options=resolve_submit_options(extra_options, no_default_options),
    )

    username = username or os.environ.get('SASR_USERNAME')
    secret_file = secret_file or os.environ.get('SASR_SECRET_FILE')
    host = host or os.environ.get('SASR_HOST')
    output_dir = output_dir or os.environ.get('SASR_OUTPUT_DIR')

    missing = [
        name for name, value in (
            ('--username', username),
            ('--secret-file', secret_file),
            ('--host', host),
            ('--output-dir', output_dir),
        ) if not value
    ]
    if missing:
        console.print(f"[red]Error (validation):[/red] Missing required option(s): {', '.join(missing)}")
        sys.exit(ValidationError.exit_code)

    try:
        request = build_request(
            username=username,
            secret_file=secret_file,
            host=host,
            source=source,
            output_dir=output_dir,
            port=cfg.port,
            report_interval_seconds=cfg.report_interval_seconds,
            chunk_size=cfg.chunk_size,
            submit_options=cfg.submit_options,
            source_encoding=cfg.source_encoding,
        )
        factory = get_backend_factory(cfg.backend)
    except SasRemoteError as e:
        console.print(f"[red]Error ({e.kind}):[/red] {e}")
        sys.exit(e.exit_code)
    except ValueError as e:
        console.print(f"[red]Error (validation):[/red] {e}")
        sys.exit(ValidationError.exit_code)

    logger.info(
        f"Submitting {request.source_path.name} to {request.host}:{request.port}",
        extra={"backend": cfg.backend, "output_dir": str(request.output_dir)},
    )

    client = RemoteSessionClient(factory(cfg), submit_options=request.submit_options)
    reporter = LoggingProgressReporter() if quiet else ConsoleProgressReporter(console)

    try:
        outcome = run_submission(request, client, reporter)
    except KeyboardInterrupt:
        # The worker is a daemon thread; the remote program is left to finish on its own
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(INTERRUPTED_EXIT_CODE)

    for artifact in (outcome.log, outcome.listing):
        label = "Log" if artifact.kind == "log" else "Listing"
        if artifact.has_content:
            console.print(f"[green]✓[/green] {label}: {artifact.path}")
        else:
            console.print(f"[dim]{label}: no output[/dim]")

    if not outcome.succeeded:
        err = outcome.error
        if isinstance(err, SasRemoteError):
            console.print(f"[red]Error ({err.kind}):[/red] {err}")
            sys.exit(err.exit_code)
        console.print(f"[red]Error:[/red] {type(err).__name__}: {err}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Completed in {outcome.elapsed_seconds:.1f}s")


@click.command()
@click.option('--submit-option', 'extra_options', multiple=True, help='Extra statement prepended to the program (repeatable)')
@click.option('--no-default-options', is_flag=True, help='Do not include the default options')
def options(extra_options, no_default_options):
    """Show the statements prepended to every submission."""
    resolved = resolve_submit_options(extra_options, no_default_options)
    if not resolved:
        console.print("[yellow]No submission options[/yellow]")
        return
    for statement in resolved:
        console.print(statement, markup=False, highlight=False)
