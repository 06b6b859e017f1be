from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


METADATA_VERSION = 1
METADATA_SOURCE = "space"


class _CompactModel(BaseModel):
    """
    Base for report models whose JSON form leaves out empty values.

    Fields listed in ``always_serialized`` are emitted even when empty or false.
    """

    always_serialized: ClassVar[frozenset] = frozenset()

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if key in self.always_serialized or value not in (None, "", [], {})
        }


class MountRequest(BaseModel):
    """
    What the caller wants cached.

    At least one of the four selectors must be set, otherwise mode resolution
    fails with EmptyMountRequestError.
    """

    detect_all_modes: bool = Field(
        default=False, description="Run detection for every registered mode"
    )
    detect_modes: List[str] = Field(
        default_factory=list, description="Modes to enable only if detected"
    )
    manual_modes: List[str] = Field(
        default_factory=list, description="Modes to enable unconditionally"
    )
    manual_paths: List[str] = Field(
        default_factory=list, description="Raw paths to mount without a mode"
    )

    def is_empty(self) -> bool:
        return not (
            self.detect_all_modes
            or self.detect_modes
            or self.manual_modes
            or self.manual_paths
        )


class DiskUsage(BaseModel):
    """Human-readable usage of the cache volume, as reported by df."""

    total: str
    used: str


class MountResult(_CompactModel):
    """One mount path and the cache path backing it. An empty mode marks a manual path."""

    always_serialized: ClassVar[frozenset] = frozenset(
        {"cache_path", "mount_path", "cache_hit"}
    )

    mode: str = Field(default="", description="Originating mode, empty for manual paths")
    cache_path: str = Field(..., description="Location under the cache root")
    mount_path: str = Field(..., description="Location the tool reads and writes")
    cache_hit: bool = Field(
        default=False, description="Cache path existed before this run mounted it"
    )


class MountResponseInput(_CompactModel):
    modes: List[str] = Field(default_factory=list)
    paths: List[str] = Field(default_factory=list)


class MountResponseOutput(_CompactModel):
    always_serialized: ClassVar[frozenset] = frozenset({"destructive_mode"})

    destructive_mode: bool = False
    add_envs: Dict[str, str] = Field(default_factory=dict)
    # lookup can fail, so inclusion is optional
    disk_usage: Optional[DiskUsage] = None
    mounts: List[MountResult] = Field(default_factory=list)
    removed_paths: List[str] = Field(default_factory=list)


class MountResponse(_CompactModel):
    """Report of a single mount invocation."""

    input: MountResponseInput = Field(default_factory=MountResponseInput)
    output: MountResponseOutput = Field(default_factory=MountResponseOutput)

    @property
    def cache_hits(self) -> int:
        return sum(1 for mount in self.output.mounts if mount.cache_hit)


class CacheMetadataEntry(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cache_framework: Optional[str] = None
    mount_target: List[str] = Field(default_factory=list)
    source: str = METADATA_SOURCE


class CacheMetadata(BaseModel):
    """
    Record of what was mounted from the cache root, keyed by cache path.

    Persisted as ``<cache root>/.ns/cache-metadata.json`` and rewritten
    wholesale on every destructive run.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    updated_at: str
    version: int = METADATA_VERSION
    user_request: Dict[str, CacheMetadataEntry] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
