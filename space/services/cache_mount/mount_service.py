"""Cache Mount Service - turns a mount request into mounts, env changes and a report."""

import logging
import os
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ...core.exceptions import (
    EmptyMountRequestError,
    FilesystemError,
    MountError,
    SpaceError,
)
from ...models import (
    CacheMetadata,
    CacheMetadataEntry,
    MountRequest,
    MountResponse,
    MountResult,
)
from ...utils.paths import abs_dir, join_under, resolve_home
from ..executor import BaseExecutor, DefaultExecutor
from ..modes import DetectRequest, Modes, PlanRequest, default_modes


PRIVATE_NAMESPACE_DIR = ".ns"
METADATA_FILENAME = "cache-metadata.json"


class CacheMountService:
    """
    Orchestrates one cache mount run.

    Outside destructive mode every step is still computed and reported, but no
    mount, removal or metadata write reaches the executor.
    """

    def __init__(
        self,
        cache_root: str,
        executor: Optional[BaseExecutor] = None,
        modes: Optional[Modes] = None,
        destructive_mode: bool = False,
    ):
        self.cache_root = cache_root
        self.destructive_mode = destructive_mode
        self._executor = executor or DefaultExecutor()
        self._modes = modes if modes is not None else default_modes()

    @classmethod
    def create(
        cls,
        cache_root: str,
        executor: Optional[BaseExecutor] = None,
        modes: Optional[Modes] = None,
        destructive_mode: bool = False,
    ) -> "CacheMountService":
        """Build a service for an existing cache root directory."""
        try:
            root = abs_dir(cache_root)
        except SpaceError as e:
            raise MountError("resolving cache root", e) from e
        return cls(root, executor=executor, modes=modes, destructive_mode=destructive_mode)

    @property
    def metadata_path(self) -> str:
        return os.path.join(self.cache_root, PRIVATE_NAMESPACE_DIR, METADATA_FILENAME)

    async def resolve_enabled_modes(self, req: MountRequest) -> Modes:
        """Manual modes plus every detected mode, validated against the registry."""
        if req.is_empty():
            raise EmptyMountRequestError()

        enabled = list(req.manual_modes)
        detect = self._modes.names() if req.detect_all_modes else list(req.detect_modes)
        if detect:
            filtered = self._modes.filter(detect)
            detected = await filtered.detect(DetectRequest(executor=self._executor))
            enabled.extend(detected.names())

        # overlapping manual and detected names collapse onto the first occurrence
        unique = list(dict.fromkeys(enabled))
        return self._modes.filter(unique)

    async def mount(self, req: MountRequest) -> MountResponse:
        response = MountResponse()
        response.output.destructive_mode = self.destructive_mode

        modes = await self.resolve_enabled_modes(req)
        await self._mount_modes(modes, response)
        await self._mount_paths(req.manual_paths, response)
        await self._write_metadata(response)

        # disk usage is informational only
        try:
            response.output.disk_usage = await self._executor.disk_usage(self.cache_root)
        except (SpaceError, OSError) as e:
            logging.debug(f"Disk usage lookup failed for {self.cache_root}: {e}")

        return response

    async def _mount_modes(self, modes: Modes, response: MountResponse) -> None:
        response.input.modes = modes.names()
        if not len(modes):
            return

        plans = await modes.plan(PlanRequest(executor=self._executor))

        for provider in modes:
            plan = plans[provider.name]

            for path in plan.mount_paths:
                try:
                    mount = await self._mount_path(provider.name, path)
                except SpaceError as e:
                    raise MountError(f"mounting mode path {path!r}", e) from e
                response.output.mounts.append(mount)

            # later modes win on key collisions
            response.output.add_envs.update(plan.add_envs)

            for path in plan.remove_paths:
                try:
                    await self._remove_path(path, response)
                except SpaceError as e:
                    raise MountError(f"removing mode path {path!r}", e) from e

    async def _mount_paths(self, paths: List[str], response: MountResponse) -> None:
        response.input.paths.extend(paths)

        for path in paths:
            try:
                mount = await self._mount_path("", path)
            except SpaceError as e:
                raise MountError(f"mounting path {path!r}", e) from e
            response.output.mounts.append(mount)

    async def _mount_path(self, mode_name: str, path: str) -> MountResult:
        path = resolve_home(path)
        cache_path = join_under(self.cache_root, path)

        try:
            await self._executor.stat(cache_path)
            cache_hit = True
        except FileNotFoundError:
            cache_hit = False
        except OSError as e:
            raise FilesystemError("stat cache path", cache_path, e) from e

        mount = MountResult(
            mode=mode_name, cache_path=cache_path, mount_path=path, cache_hit=cache_hit
        )

        if not self.destructive_mode:
            logging.debug(f"dry-run: would mount cache path from={cache_path} to={path}")
            return mount

        logging.debug(f"mounting cache path from={cache_path} to={path}")
        try:
            await self._executor.mount(cache_path, path)
        except OSError as e:
            raise FilesystemError(f"mounting {cache_path!r} to", path, e) from e
        return mount

    async def _remove_path(self, path: str, response: MountResponse) -> None:
        response.output.removed_paths.append(path)

        if not self.destructive_mode:
            logging.debug(f"dry-run: would remove path={path}")
            return

        logging.debug(f"removing path={path}")
        try:
            await self._executor.remove_all(path)
        except OSError as e:
            raise FilesystemError("removing", path, e) from e

    def build_metadata(self, response: MountResponse) -> CacheMetadata:
        """Metadata record for every mount in ``response``, keyed by cache path."""
        entries: Dict[str, CacheMetadataEntry] = {}
        for mount in response.output.mounts:
            entries[mount.cache_path] = CacheMetadataEntry(
                cache_framework=mount.mode or None,
                mount_target=[mount.mount_path],
            )

        return CacheMetadata(
            updated_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            user_request=entries,
        )

    async def _write_metadata(self, response: MountResponse) -> None:
        metadata = self.build_metadata(response)

        if not self.destructive_mode:
            logging.debug(f"dry-run: would write cache metadata path={self.metadata_path}")
            return

        data = metadata.to_json().encode("utf-8")
        metadata_dir = os.path.dirname(self.metadata_path)

        logging.debug(f"creating metadata directory path={metadata_dir}")
        try:
            await self._executor.make_dirs(metadata_dir, 0o755)
        except (SpaceError, OSError) as e:
            raise MountError("creating metadata directory", e) from e

        logging.debug(f"writing cache metadata path={self.metadata_path}")
        try:
            await self._executor.write_file(self.metadata_path, data, 0o644)
        except (SpaceError, OSError) as e:
            raise MountError("writing metadata file", e) from e
