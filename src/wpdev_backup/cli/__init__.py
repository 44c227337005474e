"""CLI for the WordPress database backup orchestrator.

Waits for the database, then restores the newest backup into an empty
database or exports a fresh timestamped backup of a populated one.

Usage:
    wpdev-backup run
    wpdev-backup run --no-wait
    wpdev-backup wait
    wpdev-backup export
    wpdev-backup restore
    wpdev-backup restore backups/db-backup-2026-01-15-101500.sql
    wpdev-backup list
    wpdev-backup --env-prefix WP_ --config wpdev-backup.toml run

Commands:
    run      - Wait for the database, then restore-or-export
    wait     - Only wait for the database to accept connections
    export   - Wait, then export a new backup unconditionally
    restore  - Wait, then restore the given (or latest) backup
    list     - List backups in the backup directory
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.table import Table

from wpdev_backup.adapters.base import DataStore
from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.adapters.mysql import MySQLDataStore
from wpdev_backup.backup.artifacts import list_artifacts
from wpdev_backup.backup.models import BackupOutcome
from wpdev_backup.backup.orchestrator import BackupOrchestrator
from wpdev_backup.config.loader import load_config
from wpdev_backup.config.models import OrchestratorConfig
from wpdev_backup.errors import WpdevBackupError
from wpdev_backup.factory import (
    build_data_store,
    build_mysql_store,
    build_orchestrator,
    build_readiness_probe,
    build_runtime,
    probe_description,
)
from wpdev_backup.logger import configure_logging
from wpdev_backup.readiness.poller import wait_until_ready

console = Console()


# ============================================================================
# Helpers
# ============================================================================


def _load(args: argparse.Namespace) -> OrchestratorConfig:
    """Load configuration from CLI options and set up logging."""
    config = load_config(
        config_path=Path(args.config) if args.config else None,
        env_file=Path(args.env_file) if args.env_file else None,
        env_prefix=args.env_prefix,
    )
    if args.log_level:
        config.logging.level = args.log_level
    configure_logging(config.logging)
    return config


def _wait_for_database(
    config: OrchestratorConfig,
    runtime: DockerRuntime,
    store: DataStore | None = None,
) -> None:
    """Block until the configured probe reports ready.

    The ``sql`` probe reuses ``store`` when it is a ``MySQLDataStore``;
    otherwise a store is opened for the wait and closed afterwards.
    """
    probe_store = store
    if config.readiness.probe == "sql" and not isinstance(store, MySQLDataStore):
        probe_store = build_mysql_store(config)
    try:
        probe = build_readiness_probe(config, runtime=runtime, store=probe_store)
        result = wait_until_ready(
            probe,
            interval=config.readiness.interval,
            timeout=config.readiness.timeout,
            description=probe_description(config),
        )
    finally:
        if probe_store is not None and probe_store is not store:
            _close(probe_store)

    console.print(
        f"[bold green]v[/bold green] Database ready "
        f"[dim]({result.attempts} attempt(s), {result.elapsed:.1f}s)[/dim]"
    )


def _print_outcome(outcome: BackupOutcome) -> None:
    if outcome.probe_failed:
        console.print(
            "[yellow]Row count query failed; database treated as empty.[/yellow]"
        )
    if outcome.action == "no_backup":
        console.print(f"[yellow]{outcome.message}[/yellow]")
    else:
        console.print(f"[bold green]v[/bold green] {outcome.message}")


def _close(store: DataStore) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        close()


def _run_action(
    args: argparse.Namespace,
    action: Callable[[BackupOrchestrator], BackupOutcome],
) -> int:
    """Load config, optionally wait, then run one orchestrator action.

    Returns:
        0 on success (including "no backup available"), 1 on failure.
    """
    try:
        config = _load(args)
        runtime = build_runtime(config)
        store = build_data_store(config, runtime=runtime)
        try:
            if not args.no_wait:
                _wait_for_database(config, runtime, store)
            outcome = action(build_orchestrator(config, store))
        finally:
            _close(store)
    except (WpdevBackupError, OSError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    _print_outcome(outcome)
    return 0


# ============================================================================
# Commands
# ============================================================================


def cmd_run(args: argparse.Namespace) -> int:
    """Wait for the database, then restore-or-export."""
    return _run_action(args, lambda orchestrator: orchestrator.run())


def cmd_export(args: argparse.Namespace) -> int:
    """Export a new backup regardless of the row count."""
    return _run_action(args, lambda orchestrator: orchestrator.export())


def cmd_restore(args: argparse.Namespace) -> int:
    """Restore the given backup, or the latest one."""
    artifact = Path(args.backup_path) if args.backup_path else None
    return _run_action(args, lambda orchestrator: orchestrator.restore(artifact))


def cmd_wait(args: argparse.Namespace) -> int:
    """Wait for the database only.

    Returns:
        0 when ready, 1 on timeout or configuration error.
    """
    try:
        config = _load(args)
        _wait_for_database(config, build_runtime(config))
    except (WpdevBackupError, OSError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List backups in the backup directory.

    Reads only the local directory -- no database calls.

    Returns:
        0 always once configuration loads, 1 on configuration error.
    """
    try:
        config = _load(args)
    except (WpdevBackupError, OSError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    backup_dir = config.backup.backup_dir
    artifacts = list_artifacts(backup_dir)
    if not artifacts:
        console.print(f"[yellow]No backups in {backup_dir}[/yellow]")
        return 0

    table = Table(title=f"Backups in {backup_dir}", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Modified")

    for i, artifact in enumerate(artifacts):
        marker = "[bold green]*[/bold green]" if i == 0 else " "
        table.add_row(
            marker,
            artifact.name,
            f"{artifact.size:,}",
            artifact.modified_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)
    console.print("\n[bold green]*[/bold green] = restored by default")
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpdev-backup",
        description="Restore-or-export orchestrator for a local WordPress database",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to TOML config file (default: ./wpdev-backup.toml if present)",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file with overrides (default: .env)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix WP_ reads WP_BACKUP_DIR)"
        ),
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Console log level (overrides LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_run = subparsers.add_parser(
        "run",
        help="Wait for the database, then restore an empty one or back up a populated one",
    )
    p_run.set_defaults(func=cmd_run)

    p_wait = subparsers.add_parser("wait", help="Wait for the database to be ready")
    p_wait.set_defaults(func=cmd_wait)

    p_export = subparsers.add_parser("export", help="Export a new backup")
    p_export.set_defaults(func=cmd_export)

    p_restore = subparsers.add_parser("restore", help="Restore a backup")
    p_restore.add_argument(
        "backup_path",
        nargs="?",
        default=None,
        help="Backup file to restore (default: latest in backup directory)",
    )
    p_restore.set_defaults(func=cmd_restore)

    for p in (p_run, p_export, p_restore):
        p.add_argument(
            "--no-wait",
            action="store_true",
            help="Skip waiting for the database",
        )

    p_list = subparsers.add_parser("list", help="List backups")
    p_list.set_defaults(func=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failures).
    """
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
