import asyncio
import logging
import sys
from typing import Iterable, List

import click

from .. import __version__
from ..core.exceptions import SpaceError
from ..dependencies import get_settings
from ..logging_config import LEVELS, setup_logging
from ..models import MountRequest
from ..services.cache_mount.mount_service import CacheMountService
from ..services.executor import DefaultExecutor
from ..services.modes import DetectRequest, default_modes
from .output import JSON, PLAIN, render_modes, render_mount, render_version, write_eval_file


COMMIT = "none"
BUILD_DATE = "unknown"

DETECT_ALL = "*"


def split_values(values: Iterable[str]) -> List[str]:
    """Flatten repeated and comma-separated option values."""
    result = []
    for value in values:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


def _run(coro):
    try:
        return asyncio.run(coro)
    except SpaceError as e:
        logging.error(str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--log_level",
    type=click.Choice([level.lower() for level in LEVELS] + ["warn"], case_sensitive=False),
    default=None,
    help="Log level (debug, info, warning, error). Defaults to LOG_LEVEL or info.",
)
@click.option(
    "-o",
    "--output",
    type=click.Choice([PLAIN, JSON]),
    default=PLAIN,
    show_default=True,
    help="Output format.",
)
@click.pass_context
def cli(ctx, log_level, output):
    """CLI used for powering cache volumes in CI."""
    ctx.ensure_object(dict)
    ctx.obj["output"] = output

    # keep stdout machine readable when emitting JSON
    stream = sys.stderr if output == JSON else sys.stdout
    try:
        setup_logging(get_settings(), level=log_level, stream=stream)
    except SpaceError as e:
        raise click.BadParameter(str(e), param_hint="--log_level") from e


@cli.group()
def cache():
    """Take advantage of cache volumes."""


@cache.command()
@click.pass_context
def modes(ctx):
    """List available cache modes and whether they are detected."""
    available = default_modes()

    async def _detect():
        return await available.detect(DetectRequest(executor=DefaultExecutor()))

    detected = _run(_detect())
    render_modes(available, detected, ctx.obj["output"])


@cache.command()
@click.option(
    "--dry_run/--no-dry_run",
    default=lambda: not get_settings().is_ci,
    help="Skip mounting, removal and metadata writes. Defaults to true outside CI.",
)
@click.option(
    "--cache_root",
    default=lambda: get_settings().cache_root,
    help="Root path where cache volumes are mounted. Defaults to NSC_CACHE_PATH.",
)
@click.option(
    "--detect",
    "detect_modes",
    multiple=True,
    help="Cache mode(s) to enable when detected. Supply '*' to run all detectors.",
)
@click.option("--mode", "manual_modes", multiple=True, help="Cache mode(s) to enable.")
@click.option("--path", "manual_paths", multiple=True, help="Cache path(s) to enable.")
@click.option(
    "--eval_file",
    default="",
    help="Write a file that can be sourced to export environment variables.",
)
@click.pass_context
def mount(ctx, dry_run, cache_root, detect_modes, manual_modes, manual_paths, eval_file):
    """Restore cache paths from the cache volume."""
    detect = split_values(detect_modes)
    request = MountRequest(
        detect_all_modes=detect == [DETECT_ALL],
        detect_modes=[] if detect == [DETECT_ALL] else detect,
        manual_modes=split_values(manual_modes),
        manual_paths=split_values(manual_paths),
    )

    async def _mount():
        service = CacheMountService.create(
            cache_root,
            executor=DefaultExecutor(),
            modes=default_modes(),
            destructive_mode=not dry_run,
        )
        if not service.destructive_mode:
            logging.info("Dry Run mode enabled.")

        response = await service.mount(request)
        if eval_file:
            write_eval_file(eval_file, response.output.add_envs)
        return response

    response = _run(_mount())
    render_mount(response, ctx.obj["output"])


@cli.command()
@click.pass_context
def version(ctx):
    """Print the version of the space CLI."""
    render_version(__version__, COMMIT, BUILD_DATE, ctx.obj["output"])


if __name__ == "__main__":
    cli()
