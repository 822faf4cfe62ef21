"""
Main CLI entry point for Droplet Snapshots.

Provides the "droplet-snapshot" command, meant to be run once a day from cron.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from droplet_snapshots import __version__
from droplet_snapshots.auth.token_auth import TokenAuthenticator
from droplet_snapshots.core.config import ConfigManager
from droplet_snapshots.core.exceptions import (
    AuthenticationError, ConfigurationError, DropletSnapshotError, ServiceError
)
from droplet_snapshots.services.models import CycleReport
from droplet_snapshots.services.orchestrator import LifecycleOrchestrator


console = Console(stderr=True)
logger = logging.getLogger("droplet_snapshots")

# Exit codes for different error types (only used with --strict)
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_AUTH_ERROR = 3
EXIT_SERVICE_ERROR = 4
EXIT_USER_CANCELLED = 130


def setup_logging(verbose: bool = False) -> None:
    """Send timestamped log lines through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%Y-%m-%dT%H:%M:%S%z]",
        handlers=[RichHandler(console=console, show_path=verbose, markup=False)],
        force=True,
    )
    # urllib3 is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_report(report: CycleReport) -> None:
    """Print a summary table of the cycle."""
    table = Table(title=f"Snapshot cycle for {report.droplet.name}")
    table.add_column("Action")
    table.add_column("Result")
    table.add_column("Duration", justify="right")

    for result in report.results:
        status = "[green]success[/green]" if result.success else "[red]error[/red]"
        table.add_row(result.action_type.value, status, f"{result.duration}s")

    console.print(table)
    if report.deleted_snapshots:
        names = ", ".join(s.name for s in report.deleted_snapshots)
        console.print(f"🗑️  Deleted {len(report.deleted_snapshots)} expired snapshots: {names}")
    else:
        console.print("No expired snapshots to delete")


@click.command()
@click.option(
    "--droplet",
    "droplet_name",
    help="Name of the droplet to snapshot (defaults to DROPLET_NAME)",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="dotenv file to load (defaults to .env in the current directory)",
)
@click.option(
    "--halt-on-failure",
    is_flag=True,
    help="Skip the remaining steps when one does not complete (power-on still runs)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with a non-zero status when the cycle fails",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log every status check",
)
@click.version_option(version=__version__)
def main(
    droplet_name: Optional[str] = None,
    env_file: Optional[Path] = None,
    halt_on_failure: bool = False,
    strict: bool = False,
    verbose: bool = False,
) -> None:
    """
    Snapshot a DigitalOcean droplet and prune old snapshots.

    Powers the droplet down, takes a snapshot named after today's date,
    powers it back up and deletes its snapshots older than the retention
    window. Failures are logged; the exit status is 0 unless --strict is set.
    """
    setup_logging(verbose)

    try:
        config = ConfigManager(env_file).load_config(
            droplet_name=droplet_name,
            halt_on_failure=True if halt_on_failure else None,
        )
    except ConfigurationError as e:
        console.print(f"❌ [red]Configuration error: {e}[/red]")
        if e.details:
            console.print(f"[dim]{e.details}[/dim]")
        if strict:
            sys.exit(EXIT_CONFIG_ERROR)
        return

    authenticator = TokenAuthenticator(config)
    exit_code = EXIT_SUCCESS

    try:
        orchestrator = LifecycleOrchestrator.from_config(config, authenticator.get_session())
        report = orchestrator.run_snapshot_cycle(config.droplet_name)
        print_report(report)
        if not report.succeeded:
            exit_code = EXIT_SERVICE_ERROR

    except KeyboardInterrupt:
        console.print("\n⚠️  [yellow]Snapshot cycle interrupted[/yellow]")
        sys.exit(EXIT_USER_CANCELLED)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        exit_code = EXIT_CONFIG_ERROR
    except AuthenticationError as e:
        logger.error(f"Authentication error: {e}")
        exit_code = EXIT_AUTH_ERROR
    except ServiceError as e:
        logger.error(f"Service error: {e}")
        exit_code = EXIT_SERVICE_ERROR
    except DropletSnapshotError as e:
        logger.error(str(e))
        exit_code = EXIT_GENERAL_ERROR
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR
    finally:
        authenticator.close()

    if strict and exit_code != EXIT_SUCCESS:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
