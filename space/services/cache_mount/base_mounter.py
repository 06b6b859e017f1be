"""Abstract Base Mounter - contract shared by the platform mount strategies."""

from abc import ABC, abstractmethod
from typing import Optional

from .privileged import PrivilegedOperations


class BaseMounter(ABC):
    """Makes a mount path resolve to the contents of a cache path."""

    def __init__(self, ops: Optional[PrivilegedOperations] = None):
        self._ops = ops or PrivilegedOperations()

    @abstractmethod
    async def mount(self, cache_path: str, mount_path: str) -> None:
        """Make mount_path show cache_path. Must be safe to repeat."""
        pass

    @abstractmethod
    def get_platform_name(self) -> str:
        """Get platform name for logging."""
        pass
