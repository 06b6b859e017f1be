"""JavaScript runtimes, package managers and browser tooling."""

import logging
import os
import platform

from packaging.version import InvalidVersion, Version

from ...core.exceptions import EmptyCacheDirError, OutputParseError
from .base import ModeProvider, PlanRequest, PlanResult, query_cache_dir, query_json


class BunProvider(ModeProvider):
    name = "bun"
    binary = "bun"
    markers = ("bun.lock",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        cache_dir = await query_cache_dir(req.executor, "bun", "pm", "cache")
        return PlanResult(mount_paths=[cache_dir])


class DenoProvider(ModeProvider):
    name = "deno"
    binary = "deno"
    markers = ("deno.lock",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        info = await query_json(req.executor, "deno", "info", "--json")
        deno_dir = info.get("denoDir")
        if not isinstance(deno_dir, str) or not deno_dir:
            raise OutputParseError("denoDir not found in deno info output")
        return PlanResult(mount_paths=[deno_dir])


PLAYWRIGHT_BROWSERS_PATH = "PLAYWRIGHT_BROWSERS_PATH"


class PlaywrightProvider(ModeProvider):
    name = "playwright"
    binary = "playwright"

    async def plan(self, req: PlanRequest) -> PlanResult:
        browsers_path = os.environ.get(PLAYWRIGHT_BROWSERS_PATH)
        if browsers_path:
            return PlanResult(mount_paths=[browsers_path])

        system = platform.system()
        if system == "Darwin":
            mount_path = "~/Library/Caches/ms-playwright"
        elif system == "Windows":
            mount_path = "%USERPROFILE%\\AppData\\Local\\ms-playwright"
        else:
            mount_path = "~/.cache/ms-playwright"
        return PlanResult(mount_paths=[mount_path])


# pnpm before 9.7.0 writes warnings to stdout even with --loglevel error
PNPM_WARNING_FIX_VERSION = Version("9.7.0")
PNPM_WARNING_PREFIX = "\u2009WARN\u2009"  # thin spaces around WARN


def strip_pnpm_warnings(output: str) -> str:
    kept = [line for line in output.split("\n") if not line.startswith(PNPM_WARNING_PREFIX)]
    return "\n".join(kept).strip()


def pnpm_prints_warnings(version_output: str) -> bool:
    """True when the reported pnpm version still mixes warnings into stdout."""
    lines = version_output.strip().split("\n")
    # the version is always the last line, warnings may precede it
    raw = lines[-1].strip()
    try:
        return Version(raw) < PNPM_WARNING_FIX_VERSION
    except InvalidVersion:
        logging.debug(f"Unparseable pnpm version {raw!r}, filtering warnings")
        return True


class PnpmProvider(ModeProvider):
    name = "pnpm"
    binary = "pnpm"
    markers = ("pnpm-lock.yaml",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        version_output = await req.executor.output("pnpm", "--version")
        filter_warnings = pnpm_prints_warnings(version_output.decode(errors="replace"))

        output = await req.executor.output("pnpm", "store", "path", "--loglevel", "error")
        store_output = output.decode(errors="replace")
        if filter_warnings:
            cache_dir = strip_pnpm_warnings(store_output)
        else:
            cache_dir = store_output.strip()

        if not cache_dir:
            raise EmptyCacheDirError("pnpm store path")

        # hard links and clones do not work across the cache volume boundary
        return PlanResult(
            add_envs={"npm_config_package_import_method": "copy"},
            mount_paths=[cache_dir],
        )


class YarnProvider(ModeProvider):
    name = "yarn"
    binary = "yarn"
    markers = ("yarn.lock",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        version_output = await req.executor.output("yarn", "--version")
        version = version_output.decode(errors="replace").strip()

        # classic yarn and berry disagree on how to ask for the cache folder
        if version.startswith("1."):
            cmd = ("yarn", "cache", "dir")
        else:
            cmd = ("yarn", "config", "get", "cacheFolder")

        cache_dir = await query_cache_dir(req.executor, *cmd)
        return PlanResult(mount_paths=[cache_dir])
