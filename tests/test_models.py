"""
Tests for report and metadata serialization.
"""

import json

from space.models import (
    CacheMetadata,
    CacheMetadataEntry,
    DiskUsage,
    MountRequest,
    MountResponse,
    MountResult,
)


class TestMountResponseJson:
    def test_empty_values_omitted(self):
        data = json.loads(MountResponse().model_dump_json())

        assert data == {"output": {"destructive_mode": False}}

    def test_populated_response(self):
        response = MountResponse()
        response.input.modes = ["go"]
        response.output.add_envs = {"E": "v"}
        response.output.disk_usage = DiskUsage(total="10G", used="1G")
        response.output.mounts = [
            MountResult(mode="go", cache_path="/R/go", mount_path="/go", cache_hit=False),
            MountResult(cache_path="/R/p", mount_path="/p", cache_hit=True),
        ]

        data = json.loads(response.model_dump_json())

        assert data["input"] == {"modes": ["go"]}
        assert data["output"]["add_envs"] == {"E": "v"}
        assert data["output"]["disk_usage"] == {"total": "10G", "used": "1G"}
        assert data["output"]["mounts"] == [
            {"mode": "go", "cache_path": "/R/go", "mount_path": "/go", "cache_hit": False},
            {"cache_path": "/R/p", "mount_path": "/p", "cache_hit": True},
        ]
        assert "removed_paths" not in data["output"]
        assert response.cache_hits == 1


def test_mount_request_is_empty():
    assert MountRequest().is_empty() is True
    assert MountRequest(detect_all_modes=True).is_empty() is False
    assert MountRequest(manual_paths=["/p"]).is_empty() is False


def test_metadata_uses_camel_case():
    metadata = CacheMetadata(
        updated_at="2024-01-01T00:00:00.000001Z",
        user_request={"/R/p": CacheMetadataEntry(mount_target=["/p"])},
    )

    data = json.loads(metadata.to_json())

    assert data == {
        "updatedAt": "2024-01-01T00:00:00.000001Z",
        "version": 1,
        "userRequest": {
            "/R/p": {"cacheFramework": None, "mountTarget": ["/p"], "source": "space"}
        },
    }
