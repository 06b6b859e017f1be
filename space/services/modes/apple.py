"""Apple platform tooling: CocoaPods, Swift Package Manager and Xcode."""

from ...core.exceptions import FilesystemError
from .base import DetectRequest, ModeProvider, PlanRequest, PlanResult, binary_present


XCODE_DERIVED_DATA = "~/Library/Developer/Xcode/DerivedData"


class CocoapodsProvider(ModeProvider):
    name = "cocoapods"
    binary = "pod"
    markers = ("Podfile",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(mount_paths=["./Pods", "~/Library/Caches/CocoaPods"])


class XcodeProvider(ModeProvider):
    """Experimental: the Xcode compilation cache can grow very large."""

    name = "xcode"
    binary = "xcodebuild"

    async def detect(self, req: DetectRequest) -> bool:
        if not await binary_present(req.executor, self.binary):
            return False

        try:
            entries = await req.executor.read_dir(".")
        except OSError as e:
            raise FilesystemError("readdir", ".", e) from e

        return any(entry.endswith(".xcodeproj") for entry in entries)

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(
            add_envs={"COMPILATION_CACHE_ENABLE_CACHING_DEFAULT": "YES"},
            mount_paths=[f"{XCODE_DERIVED_DATA}/CompilationCache.noindex"],
        )


class SwiftPMProvider(ModeProvider):
    name = "swiftpm"
    binary = "swift"
    markers = ("Package.swift",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        mount_paths = [
            "./.build",
            "~/Library/Caches/org.swift.swiftpm",
            "~/Library/org.swift.swiftpm",
        ]
        # the xcode mode already covers module caches under DerivedData
        if XcodeProvider.name not in req.enabled_modes:
            mount_paths.append(f"{XCODE_DERIVED_DATA}/ModuleCache.noindex")
        return PlanResult(mount_paths=mount_paths)
