"""Plain and JSON rendering for CLI results."""

import json
import logging
import os
from typing import Dict

import click

from ..core.exceptions import FilesystemError
from ..models import MountResponse
from ..services.modes import Modes


PLAIN = "plain"
JSON = "json"


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


def render_modes(modes: Modes, detected: Modes, output: str) -> None:
    detected_names = set(detected.names())

    if output == JSON:
        _echo_json(
            {
                "modes": {
                    name: {"detected": name in detected_names}
                    for name in modes.names()
                }
            }
        )
        return

    undetected = [name for name in modes.names() if name not in detected_names]
    for title, names in (("Detected:", sorted(detected_names)), ("Undetected:", undetected)):
        logging.info(title)
        if names:
            logging.info("- " + "\n- ".join(names))
        else:
            logging.info("None")


def render_mount(response: MountResponse, output: str) -> None:
    if output == JSON:
        click.echo(response.model_dump_json(indent=2))
        return

    if response.input.modes:
        logging.info(f"Used modes: {' '.join(response.input.modes)}")
    else:
        logging.info("No modes used")

    if response.input.paths:
        logging.info(f"Used paths: {', '.join(response.input.paths)}")
    else:
        logging.info("No paths used")

    mounts = response.output.mounts
    if mounts:
        logging.info(f"{len(mounts)} directorie(s) mounted")
        logging.info(f"Cache hit rate: {response.cache_hits}/{len(mounts)}")

    usage = response.output.disk_usage
    if usage is not None:
        logging.info(f"{usage.used} of {usage.total} used")


def render_version(version: str, commit: str, date: str, output: str) -> None:
    if output == JSON:
        _echo_json({"version": version, "commit": commit, "date": date})
        return
    logging.info(f"Space CLI {version} (commit: {commit}, built at: {date})")


def format_eval_file(add_envs: Dict[str, str]) -> str:
    """Shell ``export`` lines for ``add_envs``, sorted by key."""
    return "".join(
        f"export {key}={json.dumps(add_envs[key])}\n" for key in sorted(add_envs)
    )


def write_eval_file(path: str, add_envs: Dict[str, str]) -> bool:
    """Write a sourceable env file. Nothing is written when there is nothing to export."""
    if not add_envs:
        return False

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(format_eval_file(add_envs))
    except OSError as e:
        raise FilesystemError("writing eval file", path, e) from e
    return True
