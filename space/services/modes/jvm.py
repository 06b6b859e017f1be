"""JVM build tools."""

from .base import ModeProvider, PlanRequest, PlanResult


class GradleProvider(ModeProvider):
    name = "gradle"
    binary = "gradle"
    markers = ("gradlew", "build.gradle")

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(mount_paths=["~/.gradle/caches", "~/.gradle/wrapper"])


class MavenProvider(ModeProvider):
    name = "maven"
    binary = "mvn"
    markers = ("pom.xml",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(mount_paths=["~/.m2/repository"])
