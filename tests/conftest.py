"""
Pytest configuration and shared fixtures.
"""

import asyncio
import os
from typing import Dict, List, Optional, Sequence
from unittest.mock import AsyncMock

import pytest

from space.core.exceptions import BinaryNotFoundError
from space.dependencies import get_settings
from space.models import DiskUsage
from space.services.executor import BaseExecutor
from space.services.modes import DetectRequest, ModeProvider, PlanRequest, PlanResult


class FakeProvider(ModeProvider):
    """Scriptable provider that records the requests it receives."""

    def __init__(
        self,
        name: str,
        detected: bool = True,
        mount_paths: Sequence[str] = (),
        add_envs: Optional[Dict[str, str]] = None,
        remove_paths: Sequence[str] = (),
        error: Optional[BaseException] = None,
        block: bool = False,
    ):
        self.name = name
        self._detected = detected
        self._plan = PlanResult(
            add_envs=dict(add_envs or {}),
            mount_paths=list(mount_paths),
            remove_paths=list(remove_paths),
        )
        self._error = error
        self._block = block
        self.detect_requests: List[DetectRequest] = []
        self.plan_requests: List[PlanRequest] = []
        self.cancelled = False

    async def _maybe_fail(self) -> None:
        if self._error is not None:
            raise self._error
        if self._block:
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                self.cancelled = True
                raise

    async def detect(self, req: DetectRequest) -> bool:
        self.detect_requests.append(req)
        await self._maybe_fail()
        return self._detected

    async def plan(self, req: PlanRequest) -> PlanResult:
        self.plan_requests.append(req)
        await self._maybe_fail()
        return PlanResult(
            add_envs=dict(self._plan.add_envs),
            mount_paths=list(self._plan.mount_paths),
            remove_paths=list(self._plan.remove_paths),
        )


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def executor():
    """Executor double: every binary resolves, nothing exists on disk, no output."""
    mock = AsyncMock(spec=BaseExecutor)
    mock.locate_binary.side_effect = lambda name: f"/usr/bin/{name}"
    mock.stat.side_effect = FileNotFoundError
    mock.read_dir.return_value = []
    mock.output.return_value = b""
    mock.disk_usage.return_value = DiskUsage(total="10G", used="1G")
    return mock


@pytest.fixture
def scripted_output(executor):
    """Map full command tuples to stdout bytes for executor.output."""
    outputs: Dict[tuple, bytes] = {}

    async def _output(*cmd):
        if cmd not in outputs:
            raise AssertionError(f"unexpected command: {cmd}")
        return outputs[cmd]

    executor.output.side_effect = _output
    return outputs


@pytest.fixture
def missing_binaries(executor):
    """Names listed here fail locate_binary with BinaryNotFoundError."""
    missing = set()

    async def _locate(name):
        if name in missing:
            raise BinaryNotFoundError(name)
        return f"/usr/bin/{name}"

    executor.locate_binary.side_effect = _locate
    return missing


@pytest.fixture
def existing_paths(executor):
    """Paths listed here stat successfully; everything else is missing."""
    paths = set()

    async def _stat(path):
        if path in paths:
            return os.stat_result((0o040755, 0, 0, 1, 0, 0, 0, 0, 0, 0))
        raise FileNotFoundError(path)

    executor.stat.side_effect = _stat
    return paths


@pytest.fixture(autouse=True)
def clean_settings():
    """Settings are cached per process; reset them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
