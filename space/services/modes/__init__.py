"""
Cache modes.

Each mode provider detects one package ecosystem and plans where its caches
live. default_modes() returns a fresh registry of every built-in provider.
"""

from .apple import CocoapodsProvider, SwiftPMProvider, XcodeProvider
from .base import DetectRequest, ModeProvider, PlanRequest, PlanResult
from .golang import GoProvider, GolangCILintProvider
from .javascript import BunProvider, DenoProvider, PlaywrightProvider, PnpmProvider, YarnProvider
from .jvm import GradleProvider, MavenProvider
from .languages import ComposerProvider, RubyProvider, RustProvider
from .python import PoetryProvider, PythonProvider, UVProvider
from .registry import Modes
from .system import AptProvider, BrewProvider, MiseProvider, NixProvider


def default_modes() -> Modes:
    return Modes(
        [
            AptProvider(),
            BrewProvider(),
            BunProvider(),
            CocoapodsProvider(),
            ComposerProvider(),
            DenoProvider(),
            GoProvider(),
            GolangCILintProvider(),
            GradleProvider(),
            MavenProvider(),
            MiseProvider(),
            NixProvider(),
            PlaywrightProvider(),
            PnpmProvider(),
            PoetryProvider(),
            PythonProvider(),
            RubyProvider(),
            RustProvider(),
            SwiftPMProvider(),
            UVProvider(),
            XcodeProvider(),
            YarnProvider(),
        ]
    )


__all__ = [
    "default_modes",
    "Modes",
    "ModeProvider",
    "DetectRequest",
    "PlanRequest",
    "PlanResult",
    "AptProvider",
    "BrewProvider",
    "BunProvider",
    "CocoapodsProvider",
    "ComposerProvider",
    "DenoProvider",
    "GoProvider",
    "GolangCILintProvider",
    "GradleProvider",
    "MavenProvider",
    "MiseProvider",
    "NixProvider",
    "PlaywrightProvider",
    "PnpmProvider",
    "PoetryProvider",
    "PythonProvider",
    "RubyProvider",
    "RustProvider",
    "SwiftPMProvider",
    "UVProvider",
    "XcodeProvider",
    "YarnProvider",
]
