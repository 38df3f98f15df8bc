#!/usr/bin/env python3
"""
SAS Remote CLI - Main entry point.

Commands:
  sas-remote submit     - Submit a program, wait for it, save log and listing
  sas-remote options    - Show the statements prepended to every submission
"""

import sys

import click

from sas_remote import __version__
from sas_remote.cli.console import console
from sas_remote.errors import INTERRUPTED_EXIT_CODE
from sas_remote.logging_setup import setup_console_logging, setup_json_logging


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging')
@click.option('--json-logs', is_flag=True, help='Emit logs as JSON lines instead of rich console output')
@click.pass_context
def cli(ctx, verbose, json_logs):
    """SAS Remote - Run SAS programs on a remote workspace server."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    if json_logs:
        setup_json_logging(verbose)
    else:
        setup_console_logging(console, verbose)


# Import subcommands
from sas_remote.cli.submit import options, submit

cli.add_command(submit)
cli.add_command(options)


def main():
    """Main entry point."""
    # Not standalone: click would turn Ctrl+C into Abort and exit 1
    try:
        rv = cli.main(obj={}, standalone_mode=False)
    except (KeyboardInterrupt, click.exceptions.Abort):
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(INTERRUPTED_EXIT_CODE)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if '--verbose' in sys.argv or '-v' in sys.argv:
            raise
        sys.exit(1)
    sys.exit(rv if isinstance(rv, int) else 0)


if __name__ == '__main__':
    main()
