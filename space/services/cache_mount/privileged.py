"""
Privilege-escalation steps for materializing mounts.

Every step is a separate coroutine (check, create, re-own) so the
ancestor-creation loop can be exercised with a fake operations object.
"""

import asyncio
import logging
import os
from typing import Optional

import aiofiles.os

from ...core.exceptions import CommandError, FilesystemError, MountError
from ...utils.paths import ancestors
from ...utils.process import run


class PrivilegedOperations:
    """sudo-backed filesystem operations used by the platform mounters."""

    def __init__(self, sudo: str = "sudo"):
        self._sudo = sudo

    async def lstat(self, path: str) -> Optional[os.stat_result]:
        """Stat without following links. Returns None when nothing exists at path."""
        try:
            return await asyncio.to_thread(os.lstat, path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FilesystemError("stating to path", path, e) from e

    async def exists(self, path: str) -> bool:
        try:
            await aiofiles.os.stat(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FilesystemError("stat", path, e) from e
        return True

    async def make_dir(self, path: str) -> None:
        await run(self._sudo, "mkdir", path)

    async def chown_self(self, path: str) -> None:
        """Hand ``path`` back to the invoking user."""
        owner = f"{os.getuid()}:{os.getgid()}"
        try:
            await run(self._sudo, "chown", owner, path)
        except CommandError as e:
            raise MountError("sudo chown failed", e) from e

    async def remove_all(self, path: str) -> None:
        await run(self._sudo, "rm", "-rf", path)

    async def bind_mount(self, source: str, target: str) -> None:
        await run(self._sudo, "mount", "--bind", source, target)

    async def symlink(self, source: str, target: str) -> None:
        await run(self._sudo, "ln", "-sfn", source, target)


async def sudo_mkdir_p(ops: PrivilegedOperations, path: str) -> None:
    """Create every missing ancestor of ``path`` (inclusive), owned by the current user."""
    for directory in ancestors(path):
        if await ops.exists(directory):
            continue

        logging.debug(f"Creating directory with elevated privileges: {directory}")
        try:
            await ops.make_dir(directory)
        except CommandError as e:
            raise MountError(f"sudo mkdir directory `{directory}`", e) from e

        try:
            await ops.chown_self(directory)
        except MountError as e:
            raise MountError(f"chown {directory!r}", e) from e
