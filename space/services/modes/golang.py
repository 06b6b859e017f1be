"""Go toolchain and golangci-lint."""

from ...core.exceptions import OutputParseError
from .base import ModeProvider, PlanRequest, PlanResult, query_json


GO_CACHE = "GOCACHE"
GO_MOD_CACHE = "GOMODCACHE"


class GoProvider(ModeProvider):
    name = "go"
    binary = "go"
    markers = ("go.mod", "go.work")

    async def plan(self, req: PlanRequest) -> PlanResult:
        env = await query_json(req.executor, "go", "env", "-json", GO_CACHE, GO_MOD_CACHE)
        for key in (GO_CACHE, GO_MOD_CACHE):
            if key not in env:
                raise OutputParseError(f"{key} not found in go env output")
        return PlanResult(mount_paths=[env[GO_CACHE], env[GO_MOD_CACHE]])


GOLANGCI_LINT_DIR_PREFIX = "dir:"
GOLANGCI_LINT_DEFAULT_CACHE_DIR = "~/.cache/golangci-lint"


def parse_golangci_lint_cache_dir(status: str) -> str:
    """Find the ``Dir: <path>`` line of ``golangci-lint cache status``."""
    for line in status.splitlines():
        line = line.strip()
        if line.lower().startswith(GOLANGCI_LINT_DIR_PREFIX):
            return line[len(GOLANGCI_LINT_DIR_PREFIX):].strip()
    return GOLANGCI_LINT_DEFAULT_CACHE_DIR


class GolangCILintProvider(ModeProvider):
    name = "golangci-lint"
    binary = "golangci-lint"
    markers = (".golangci.yml", ".golangci.yaml")

    async def plan(self, req: PlanRequest) -> PlanResult:
        output = await req.executor.output("golangci-lint", "cache", "status")
        cache_dir = parse_golangci_lint_cache_dir(output.decode(errors="replace"))
        return PlanResult(mount_paths=[cache_dir])
