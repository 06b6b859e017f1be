"""Linux Cache Mounter - bind mounts."""

import logging
import stat

from ...core.exceptions import CommandError, MountError
from .base_mounter import BaseMounter
from .privileged import sudo_mkdir_p


class LinuxMounter(BaseMounter):
    """Bind-mounts the cache path over the mount path."""

    async def mount(self, cache_path: str, mount_path: str) -> None:
        # existing files can't be mounted over, so we'll need to remove first
        info = await self._ops.lstat(mount_path)
        if info is not None and not stat.S_ISDIR(info.st_mode):
            logging.debug(f"Removing non-directory at mount path: {mount_path}")
            try:
                await self._ops.remove_all(mount_path)
            except CommandError as e:
                raise MountError(
                    f"removing non-directory to path {mount_path!r}", e
                ) from e

        await sudo_mkdir_p(self._ops, mount_path)

        try:
            await self._ops.bind_mount(cache_path, mount_path)
        except CommandError as e:
            raise MountError(
                f"binding from {cache_path!r} to {mount_path!r}", e
            ) from e

    def get_platform_name(self) -> str:
        return "Linux"
