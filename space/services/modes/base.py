"""
Mode provider contract.

A mode provider knows one package ecosystem: whether it is in use in the
current working directory (detect) and where its tooling keeps caches (plan).
Providers hold no state, so one instance can serve concurrent calls.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ...core.exceptions import (
    BinaryNotFoundError,
    EmptyCacheDirError,
    FilesystemError,
    OutputParseError,
)
from ..executor import BaseExecutor


@dataclass
class DetectRequest:
    executor: Optional[BaseExecutor] = None


@dataclass
class PlanRequest:
    executor: Optional[BaseExecutor] = None
    # names of every mode enabled in this run, filled in by Modes.plan
    enabled_modes: Tuple[str, ...] = ()


@dataclass
class PlanResult:
    """
    Where a mode wants caches mounted.

    Paths may start with ``~``; expansion happens in the mount orchestrator.
    """

    add_envs: Dict[str, str] = field(default_factory=dict)
    mount_paths: List[str] = field(default_factory=list)
    remove_paths: List[str] = field(default_factory=list)


class ModeProvider(ABC):
    """
    One cache mode.

    The default detect() requires ``binary`` on PATH and, when ``markers`` is
    non-empty, at least one marker file in the working directory.
    """

    name: str = ""
    binary: str = ""
    markers: Tuple[str, ...] = ()

    async def detect(self, req: DetectRequest) -> bool:
        if not await binary_present(req.executor, self.binary):
            return False
        if not self.markers:
            return True
        return await any_marker_present(req.executor, self.markers)

    @abstractmethod
    async def plan(self, req: PlanRequest) -> PlanResult:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


async def binary_present(executor: BaseExecutor, binary: str) -> bool:
    """A missing binary is a negative answer, any other lookup failure is an error."""
    try:
        await executor.locate_binary(binary)
    except BinaryNotFoundError:
        return False
    except OSError as e:
        raise FilesystemError("lookpath", binary, e) from e
    return True


async def file_present(executor: BaseExecutor, path: str) -> bool:
    try:
        await executor.stat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise FilesystemError("stat", path, e) from e
    return True


async def any_marker_present(executor: BaseExecutor, markers: Tuple[str, ...]) -> bool:
    for marker in markers:
        if await file_present(executor, marker):
            return True
    return False


async def query_cache_dir(executor: BaseExecutor, *cmd: str) -> str:
    """Ask a tool for its cache directory; the answer is the trimmed stdout."""
    output = await executor.output(*cmd)
    cache_dir = output.decode(errors="replace").strip()
    if not cache_dir:
        raise EmptyCacheDirError(" ".join(cmd))
    return cache_dir


async def query_json(executor: BaseExecutor, *cmd: str) -> Dict[str, Any]:
    output = await executor.output(*cmd)
    try:
        data = json.loads(output)
    except ValueError as e:
        raise OutputParseError(f"parse {cmd[0]} output: {e}") from e
    if not isinstance(data, dict):
        raise OutputParseError(f"parse {cmd[0]} output: expected a JSON object")
    return data
