from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import click
from prometheus_client import start_http_server
from pydantic import ValidationError

from isobatch.config.config import RunnerConfig
from isobatch.grouping.grouper import SourceDirectoryNotFoundError
from isobatch.runner.batch_runner import plan_batches, run_batches
from isobatch.runner.cancellation import CancellationToken
from isobatch.runner.models import CollisionPolicy, GroupResult, GroupStatus, RunStatus
from isobatch.utils.logging import configure_logging, get_logger
from isobatch.utils.signals import restore_signal_handlers, setup_signal_handlers

EXIT_CANCELLED = 130


def _load_config(config_path: Optional[str], overrides: dict[str, Any]) -> RunnerConfig:
    """YAML file (if given) or environment, with CLI options on top."""
    try:
        base = (
            RunnerConfig.from_yaml(config_path)
            if config_path
            else RunnerConfig.from_env()
        )
        data = base.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return RunnerConfig(**data)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


def _echo_progress(done: int, total: int, result: Optional[GroupResult]) -> None:
    if result is not None and result.status is GroupStatus.FAILED:
        click.echo(f"Error in group {result.group_index}: {result.error}", err=True)
    click.echo(f"{done}/{total} groups complete")


_common_options = [
    click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="YAML configuration file (defaults to ISOBATCH_* environment).",
    ),
    click.option("--source-dir", type=click.Path(path_type=Path), default=None),
    click.option("--temp-root", type=click.Path(path_type=Path), default=None),
    click.option("--max-group-bytes", type=int, default=None),
    click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default=None,
    ),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="isobatch")
def cli() -> None:
    """Batch files into size-bounded groups and process each group in isolation."""


@cli.command("plan")
@common_options
def plan_command(
    config_path: Optional[str],
    source_dir: Optional[Path],
    temp_root: Optional[Path],
    max_group_bytes: Optional[int],
    log_level: Optional[str],
) -> None:
    """Show how the source directory would be grouped, without moving files."""
    config = _load_config(
        config_path,
        {
            "source_dir": source_dir,
            "temp_root": temp_root,
            "max_group_bytes": max_group_bytes,
            "log_level": log_level,
        },
    )
    configure_logging(level=config.log_level, json_output=config.json_logs)
    try:
        groups = plan_batches(config)
    except SourceDirectoryNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc

    for group in groups:
        click.echo(
            f"Group {group.index}: {len(group)} file(s), {group.total_bytes} bytes"
        )
        for name in group.names:
            click.echo(f"  {name}")
    click.echo(f"{len(groups)} group(s) planned")


@cli.command("run")
@common_options
@click.option("--workers", "max_workers", type=click.IntRange(min=1), default=None)
@click.option("--file-delay", "file_delay_seconds", type=float, default=None)
@click.option(
    "--collision-policy",
    type=click.Choice([policy.value for policy in CollisionPolicy]),
    default=None,
)
@click.option("--json-logs/--console-logs", default=None)
@click.option("--metrics-port", type=click.IntRange(1, 65535), default=None)
def run_command(
    config_path: Optional[str],
    source_dir: Optional[Path],
    temp_root: Optional[Path],
    max_group_bytes: Optional[int],
    log_level: Optional[str],
    max_workers: Optional[int],
    file_delay_seconds: Optional[float],
    collision_policy: Optional[str],
    json_logs: Optional[bool],
    metrics_port: Optional[int],
) -> None:
    """Move, process and restore every group; Ctrl+C cancels cooperatively."""
    config = _load_config(
        config_path,
        {
            "source_dir": source_dir,
            "temp_root": temp_root,
            "max_group_bytes": max_group_bytes,
            "log_level": log_level,
            "max_workers": max_workers,
            "file_delay_seconds": file_delay_seconds,
            "collision_policy": collision_policy,
            "json_logs": json_logs,
            "metrics_port": metrics_port,
        },
    )
    configure_logging(level=config.log_level, json_output=config.json_logs)
    logger = get_logger(__name__)

    if not config.source_dir.is_dir():
        raise click.ClickException(str(SourceDirectoryNotFoundError(config.source_dir)))

    if config.metrics_port:
        start_http_server(config.metrics_port)

    logger.info(
        "starting_run",
        config=config.model_dump(mode="json"),
        workers=config.resolved_workers,
    )
    click.echo("Starting. Press Ctrl+C to cancel.")

    token = CancellationToken()
    previous_handlers = setup_signal_handlers(token)
    try:
        report = run_batches(config, token=token, on_progress=_echo_progress)
    except SourceDirectoryNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        restore_signal_handlers(previous_handlers)

    click.echo(report.summary())
    if report.status is RunStatus.CANCELLED:
        sys.exit(EXIT_CANCELLED)


def main() -> None:
    """Entry point for the isobatch CLI."""
    cli()


if __name__ == "__main__":
    main()
