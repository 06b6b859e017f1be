import os
import stat
from typing import List

from ..core.exceptions import FilesystemError, InvalidInputError


def resolve_home(path: str) -> str:
    """
    Expand a leading ``~`` to the current user's home directory.

    Only ``~`` and ``~/...`` are expanded; ``~user`` forms are returned unchanged.
    """
    if not path.startswith("~"):
        return path

    home = os.path.expanduser("~")
    if home == "~":
        raise InvalidInputError("get user home dir: $HOME is not defined")

    if path == "~":
        return home
    if path.startswith("~/"):
        return os.path.join(home, path[2:])
    return path


def join_under(root: str, path: str) -> str:
    """Place ``path`` below ``root``, also when ``path`` is absolute."""
    return os.path.normpath(os.path.join(root, path.lstrip(os.sep)))


def ancestors(path: str) -> List[str]:
    """All directories from the top of ``path`` down to ``path`` itself."""
    result = []
    path = os.path.normpath(path)
    while path not in (os.sep, ".", ""):
        result.append(path)
        path = os.path.dirname(path)
    result.reverse()
    return result


def abs_dir(path: str) -> str:
    """Resolve ``path`` to an absolute path of an existing directory."""
    if not path:
        raise InvalidInputError("path is empty")

    abs_path = os.path.abspath(path)
    try:
        st = os.stat(abs_path)
    except FileNotFoundError:
        raise InvalidInputError(f"path {abs_path!r} does not exist") from None
    except OSError as e:
        raise FilesystemError("stating path", abs_path, e) from e

    if not stat.S_ISDIR(st.st_mode):
        raise InvalidInputError(f"path {abs_path!r} is not a directory")
    return abs_path
