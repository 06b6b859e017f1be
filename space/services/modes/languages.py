"""Language package managers without a better home: Composer, Bundler and Cargo."""

from .base import ModeProvider, PlanRequest, PlanResult, query_cache_dir


class ComposerProvider(ModeProvider):
    name = "composer"
    binary = "composer"
    markers = ("composer.json",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        cache_dir = await query_cache_dir(
            req.executor, "composer", "config", "--global", "cache-files-dir"
        )
        return PlanResult(mount_paths=[cache_dir])


class RubyProvider(ModeProvider):
    name = "ruby"
    binary = "bundle"
    markers = ("Gemfile",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        return PlanResult(
            mount_paths=[
                "./vendor/bundle",  # bundle install
                "./vendor/cache",  # bundle cache
            ]
        )


class RustProvider(ModeProvider):
    name = "rust"
    binary = "cargo"
    markers = ("Cargo.toml",)

    async def plan(self, req: PlanRequest) -> PlanResult:
        # not all of ~/.cargo: ~/.cargo/bin holds the toolchain binaries
        return PlanResult(
            mount_paths=[
                "~/.cargo/registry",
                "~/.cargo/git",
                "./target",
                "~/.cargo/.global-cache",
            ]
        )
