"""
Tests for DefaultExecutor and the subprocess runner, against the real system.
"""

import asyncio
import os
import sys
from unittest.mock import AsyncMock

import pytest

from space.core.exceptions import (
    BinaryNotFoundError,
    CommandError,
    MountError,
    OutputParseError,
)
from space.models import DiskUsage
from space.services.cache_mount import BaseMounter
from space.services.executor import DefaultExecutor
from space.utils.process import run


pytestmark = [
    pytest.mark.asyncio,
    pytest.mark.skipif(sys.platform == "win32", reason="POSIX tools required"),
]


@pytest.fixture
def mounter():
    return AsyncMock(spec=BaseMounter)


@pytest.fixture
def default_executor(mounter):
    return DefaultExecutor(mounter=mounter)


class TestRun:
    async def test_captures_stdout(self):
        assert await run("sh", "-c", "echo hello") == b"hello\n"

    async def test_nonzero_exit(self):
        with pytest.raises(CommandError) as exc_info:
            await run("sh", "-c", "echo broken >&2; exit 3")

        assert exc_info.value.returncode == 3
        assert "exit status 3" in str(exc_info.value)
        assert "broken" in str(exc_info.value)

    async def test_missing_executable(self):
        with pytest.raises(CommandError):
            await run("definitely-not-a-real-binary-3f9a")

    async def test_cancellation_kills_child(self):
        task = asyncio.create_task(run("sleep", "30"))
        await asyncio.sleep(0.2)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(task, timeout=5)


class TestDefaultExecutor:
    async def test_locate_binary(self, default_executor):
        assert os.path.basename(await default_executor.locate_binary("sh")) == "sh"

    async def test_locate_missing_binary(self, default_executor):
        with pytest.raises(BinaryNotFoundError, match="executable file not found"):
            await default_executor.locate_binary("definitely-not-a-real-binary-3f9a")

    async def test_filesystem_roundtrip(self, default_executor, tmp_path):
        target = tmp_path / "meta" / "nested"
        await default_executor.make_dirs(str(target))
        await default_executor.write_file(str(target / "b.json"), b"{}", 0o600)
        await default_executor.write_file(str(target / "a.json"), b"[]", 0o600)

        assert await default_executor.read_dir(str(target)) == ["a.json", "b.json"]
        assert (target / "a.json").read_bytes() == b"[]"
        assert (target / "a.json").stat().st_mode & 0o777 == 0o600
        assert (await default_executor.stat(str(target))).st_size >= 0

    async def test_stat_missing(self, default_executor, tmp_path):
        with pytest.raises(FileNotFoundError):
            await default_executor.stat(str(tmp_path / "missing"))

    async def test_mount_creates_cache_path_and_delegates(self, default_executor, mounter, tmp_path):
        cache_path = tmp_path / "cache" / "home" / "u"
        mount_path = tmp_path / "home" / "u"

        await default_executor.mount(str(cache_path), str(mount_path))

        assert cache_path.is_dir()
        mounter.mount.assert_awaited_once_with(str(cache_path), str(mount_path))

    async def test_mount_without_mounter(self, tmp_path):
        executor = DefaultExecutor(mounter=None)
        executor._mounter = None

        with pytest.raises(MountError):
            await executor.mount(str(tmp_path / "c"), str(tmp_path / "m"))

    async def test_disk_usage_parses_df(self, default_executor, monkeypatch):
        df = AsyncMock(
            return_value=(
                b"Filesystem      Size  Used Avail Use% Mounted on\n"
                b"/dev/nvme0n1p1  100G   40G   60G  40% /cache\n"
            )
        )
        monkeypatch.setattr("space.services.executor.run", df)

        usage = await default_executor.disk_usage("/cache")

        assert usage == DiskUsage(total="100G", used="40G")
        df.assert_awaited_once_with("df", "-h", "/cache")

    @pytest.mark.parametrize(
        "output, message",
        [
            (b"Filesystem Size Used\n", "missing data line"),
            (b"Filesystem Size Used\n/dev/sda 10G\n", "insufficient columns"),
        ],
    )
    async def test_disk_usage_malformed(self, default_executor, monkeypatch, output, message):
        monkeypatch.setattr("space.services.executor.run", AsyncMock(return_value=output))

        with pytest.raises(OutputParseError, match=message):
            await default_executor.disk_usage("/cache")
