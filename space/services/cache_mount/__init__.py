"""
Cache Mount Module

Turns planned cache paths into filesystem mounts.

Components:
- CacheMountService (mount_service.py): orchestrates detection, planning and mounting
- BaseMounter: contract for the platform mount strategies
- LinuxMounter: bind mounts
- MacOSMounter: directory symlinks
- PlatformFactory: picks the mounter for the running platform
- PrivilegedOperations: sudo steps shared by the mounters
"""

from .base_mounter import BaseMounter
from .platform_factory import PlatformFactory, UnsupportedPlatformError
from .privileged import PrivilegedOperations, sudo_mkdir_p

__all__ = [
    "BaseMounter",
    "PlatformFactory",
    "UnsupportedPlatformError",
    "PrivilegedOperations",
    "sudo_mkdir_p",
]
