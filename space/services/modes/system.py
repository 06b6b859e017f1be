"""System-level package managers and toolchain installers."""

import os
import platform
import re

from ...core.exceptions import OutputParseError
from .base import ModeProvider, PlanRequest, PlanResult, file_present, query_cache_dir


APT_DIR_CACHE = "Dir::Cache"
APT_DIR_CACHE_ARCHIVES = "Dir::Cache::archives"
APT_DIR_ETC = "Dir::Etc"
APT_DIR_ETC_PARTS = "Dir::Etc::parts"

_APT_KEYS = {APT_DIR_CACHE, APT_DIR_CACHE_ARCHIVES, APT_DIR_ETC, APT_DIR_ETC_PARTS}
_APT_CONFIG_LINE = re.compile(r'(.+)\s"(.*)";')


def parse_apt_config(dump: str) -> dict:
    """Pick the directory keys we care about out of ``apt-config dump`` output."""
    config = {}
    for line in dump.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _APT_CONFIG_LINE.search(line)
        if match and match.group(1) in _APT_KEYS:
            config[match.group(1)] = match.group(2)
    return config


class AptProvider(ModeProvider):
    name = "apt"
    binary = "apt-config"

    async def plan(self, req: PlanRequest) -> PlanResult:
        output = await req.executor.output("apt-config", "dump")
        config = parse_apt_config(output.decode(errors="replace"))

        for key in (APT_DIR_CACHE, APT_DIR_CACHE_ARCHIVES):
            if key not in config:
                raise OutputParseError(f"{key} not found in apt-config output")

        result = PlanResult(
            mount_paths=[f"/{config[APT_DIR_CACHE]}/{config[APT_DIR_CACHE_ARCHIVES]}"]
        )

        # docker base images ship a hook that wipes the archive cache after every install
        if config.get(APT_DIR_ETC) and config.get(APT_DIR_ETC_PARTS):
            docker_clean = f"/{config[APT_DIR_ETC]}/{config[APT_DIR_ETC_PARTS]}/docker-clean"
            if await file_present(req.executor, docker_clean):
                result.remove_paths.append(docker_clean)

        return result


class BrewProvider(ModeProvider):
    name = "brew"
    binary = "brew"
    markers = ("Brewfile",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        cache_dir = await query_cache_dir(req.executor, "brew", "--cache")
        return PlanResult(mount_paths=[cache_dir])


MISE_DEFAULT_DIR = "mise"


class MiseProvider(ModeProvider):
    name = "mise"
    binary = "mise"
    markers = (
        "mise.toml",
        ".mise.toml",
        ".tool-versions",
        "mise/config.toml",
        ".mise/config.toml",
        ".config/mise.toml",
        ".config/mise/config.toml",
    )

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(mount_paths=[self._data_dir()])

    def _data_dir(self) -> str:
        if os.environ.get("MISE_DATA_DIR"):
            return os.environ["MISE_DATA_DIR"]
        if os.environ.get("XDG_DATA_HOME"):
            return os.path.join(os.environ["XDG_DATA_HOME"], MISE_DEFAULT_DIR)
        if platform.system() == "Windows" and os.environ.get("LOCALAPPDATA"):
            return os.path.join(os.environ["LOCALAPPDATA"], MISE_DEFAULT_DIR)
        return os.path.join(os.path.expanduser("~"), ".local", "share", MISE_DEFAULT_DIR)


class NixProvider(ModeProvider):
    name = "nix"
    binary = "nix"
    markers = ("flake.nix", "shell.nix", "default.nix")

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(mount_paths=["~/.cache/nix", "/nix"])
