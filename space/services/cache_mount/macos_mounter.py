"""macOS Cache Mounter - directory symlinks."""

import logging
import os

from ...core.exceptions import CommandError, MountError
from .base_mounter import BaseMounter
from .privileged import sudo_mkdir_p


class MacOSMounter(BaseMounter):
    """macOS has no bind mounts, so the mount path becomes a symlink to the cache path."""

    async def mount(self, cache_path: str, mount_path: str) -> None:
        await sudo_mkdir_p(self._ops, os.path.dirname(mount_path))

        try:
            await self._ops.remove_all(mount_path)
        except CommandError as e:
            raise MountError(f"removing to path {mount_path!r}", e) from e

        logging.debug(f"Symlinking {mount_path} -> {cache_path}")
        try:
            await self._ops.symlink(cache_path, mount_path)
        except CommandError as e:
            raise MountError(
                f"symlinking from {cache_path!r} to {mount_path!r}", e
            ) from e

        await self._ops.chown_self(mount_path)

    def get_platform_name(self) -> str:
        return "macOS"
