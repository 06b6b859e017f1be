"""Python packaging tools."""

from .base import ModeProvider, PlanRequest, PlanResult, query_cache_dir


class PythonProvider(ModeProvider):
    name = "python"
    binary = "pip"
    markers = ("requirements.txt",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        cache_dir = await query_cache_dir(req.executor, "pip", "cache", "dir")
        return PlanResult(mount_paths=[cache_dir])


class PoetryProvider(ModeProvider):
    name = "poetry"
    binary = "poetry"
    markers = ("poetry.lock",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        cache_dir = await query_cache_dir(req.executor, "poetry", "config", "cache-dir")
        return PlanResult(mount_paths=[cache_dir])


class UVProvider(ModeProvider):
    name = "uv"
    binary = "uv"
    markers = ("uv.lock",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        cache_dir = await query_cache_dir(req.executor, "uv", "cache", "dir")
        # uv's default clone/hardlink modes fall back to copying on a cache volume
        return PlanResult(
            add_envs={"UV_LINK_MODE": "symlink"},
            mount_paths=[cache_dir],
        )
