"""Platform Factory - platform detection and mounter creation."""

import logging
import platform
from typing import Optional

from .base_mounter import BaseMounter
from .privileged import PrivilegedOperations


class UnsupportedPlatformError(Exception):
    """Raised when platform is not supported for cache mounting."""
    pass


class PlatformFactory:
    """Picks the mount strategy once, from the operating system we run on."""

    def detect_platform(self) -> str:
        """Detect current platform. Returns: macos, windows, or linux."""
        system = platform.system().lower()

        if system == "darwin":
            return "macos"
        elif system == "windows":
            return "windows"
        elif system == "linux":
            return "linux"
        else:
            raise UnsupportedPlatformError(f"Platform {system} not supported for cache mounting")

    def create_mounter(self, ops: Optional[PrivilegedOperations] = None) -> BaseMounter:
        """Create platform-specific mounter instance."""
        platform_name = self.detect_platform()

        if platform_name == "macos":
            from .macos_mounter import MacOSMounter
            mounter = MacOSMounter(ops)
        elif platform_name == "linux":
            from .linux_mounter import LinuxMounter
            mounter = LinuxMounter(ops)
        else:
            raise UnsupportedPlatformError(f"No mounter implementation for platform: {platform_name}")

        logging.debug(f"Initialized {mounter.get_platform_name()} mounter")
        return mounter
