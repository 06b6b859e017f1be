"""
Command & filesystem executor.

Everything the providers and the mount orchestrator do to the outside world
goes through an executor, so tests can swap in an AsyncMock(spec=BaseExecutor).
"""

import asyncio
import functools
import logging
import os
import shutil
from abc import ABC, abstractmethod
from typing import List, Optional

import aiofiles
import aiofiles.os

from ..core.exceptions import (
    BinaryNotFoundError,
    FilesystemError,
    MountError,
    OutputParseError,
)
from ..models import DiskUsage
from ..utils.process import run
from .cache_mount.base_mounter import BaseMounter
from .cache_mount.platform_factory import PlatformFactory, UnsupportedPlatformError


class BaseExecutor(ABC):
    """Capabilities consumed by mode providers and the mount orchestrator."""

    @abstractmethod
    async def locate_binary(self, name: str) -> str:
        """Return the resolved path of ``name``; raise BinaryNotFoundError if absent."""

    @abstractmethod
    async def output(self, *cmd: str) -> bytes:
        """Run ``cmd`` and return stdout; raise CommandError on failure."""

    @abstractmethod
    async def stat(self, path: str) -> os.stat_result:
        """Stat ``path``; raise FileNotFoundError when it does not exist."""

    @abstractmethod
    async def read_dir(self, path: str) -> List[str]:
        """Names of the entries in ``path``."""

    @abstractmethod
    async def make_dirs(self, path: str, mode: int = 0o755) -> None:
        pass

    @abstractmethod
    async def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        pass

    @abstractmethod
    async def remove_all(self, path: str) -> None:
        pass

    @abstractmethod
    async def mount(self, cache_path: str, mount_path: str) -> None:
        pass

    @abstractmethod
    async def disk_usage(self, path: str) -> DiskUsage:
        pass


class DefaultExecutor(BaseExecutor):
    """Executor backed by the real operating system."""

    def __init__(self, mounter: Optional[BaseMounter] = None):
        self._mounter = mounter
        if self._mounter is None:
            try:
                self._mounter = PlatformFactory().create_mounter()
            except UnsupportedPlatformError as e:
                logging.warning(f"Cache mounting unavailable: {e}")

    async def locate_binary(self, name: str) -> str:
        path = await asyncio.to_thread(shutil.which, name)
        if not path:
            raise BinaryNotFoundError(name)
        return path

    async def output(self, *cmd: str) -> bytes:
        return await run(*cmd)

    async def stat(self, path: str) -> os.stat_result:
        return await aiofiles.os.stat(path)

    async def read_dir(self, path: str) -> List[str]:
        return sorted(await aiofiles.os.listdir(path))

    async def make_dirs(self, path: str, mode: int = 0o755) -> None:
        await aiofiles.os.makedirs(path, mode=mode, exist_ok=True)

    async def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        opener = functools.partial(os.open, mode=mode)
        async with aiofiles.open(path, "wb", opener=opener) as f:
            await f.write(data)

    async def remove_all(self, path: str) -> None:
        await run("sudo", "rm", "-rf", path)

    async def mount(self, cache_path: str, mount_path: str) -> None:
        if self._mounter is None:
            raise MountError(
                f"mounting {cache_path!r} to {mount_path!r}",
                UnsupportedPlatformError("no mounter for this platform"),
            )

        if not await self._is_empty_dir(mount_path):
            logging.debug(f"Mount path will be overwritten: {mount_path}")

        logging.debug(f"Mounting path from {cache_path} to {mount_path}")

        # create cache path, this is noop if it already exists
        try:
            await aiofiles.os.makedirs(cache_path, mode=0o755, exist_ok=True)
        except OSError as e:
            raise FilesystemError("creating from path", cache_path, e) from e

        await self._mounter.mount(cache_path, mount_path)

    async def disk_usage(self, path: str) -> DiskUsage:
        output = await run("df", "-h", path)

        lines = output.decode(errors="replace").strip().splitlines()
        if len(lines) < 2:
            raise OutputParseError("unexpected df output: missing data line")

        columns = lines[1].split()
        if len(columns) < 3:
            raise OutputParseError("unexpected df output: insufficient columns")

        return DiskUsage(total=columns[1], used=columns[2])

    async def _is_empty_dir(self, path: str) -> bool:
        try:
            entries = await aiofiles.os.listdir(path)
        except FileNotFoundError:
            return True
        except NotADirectoryError:
            return False
        except OSError as e:
            raise FilesystemError("checking mount path content", path, e) from e
        return len(entries) == 0
