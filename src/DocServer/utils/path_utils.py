"""Utility functions for mapping request paths onto the serving root."""

import os
from typing import Union

from DocServer.utils.exceptions import ForbiddenError

FORBIDDEN_MESSAGE = "Access outside the document root is forbidden."


def resolve_request_path(root: Union[str, os.PathLike], request_path: str) -> str:
    """
    Join a URL path onto the serving root and refuse anything that lands outside it.

    The join is purely lexical: ``.`` and ``..`` segments are collapsed with
    ``os.path.normpath`` and the result is then gated by a prefix check against
    ``root`` followed by a path separator, so that a sibling directory such as
    ``/srv/docs-old`` is never admitted for a root of ``/srv/docs``. Symlinks are
    not followed and the filesystem is never touched.

    Parameters
    ----------
    root : str or os.PathLike
        The canonical absolute serving root.
    request_path : str
        The decoded path component of the request URL, e.g. ``/guide/intro.md``.

    Returns
    -------
    str
        The absolute filesystem path of the requested resource.

    Raises
    ------
    ForbiddenError
        If the joined path is not the root itself or a descendant of it.
    """
    root_str = os.fspath(root)
    # An absolute-looking request path must not replace the root in os.path.join.
    relative = request_path.lstrip("/\\")
    resolved = os.path.normpath(os.path.join(root_str, relative))

    root_prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    if resolved != root_str and not resolved.startswith(root_prefix):
        raise ForbiddenError(FORBIDDEN_MESSAGE)
    return resolved


def is_inside_git_dir(root: Union[str, os.PathLike], resolved_path: str) -> bool:
    """Return True if ``resolved_path`` points at ``.git`` or anything beneath it."""
    relative = os.path.relpath(resolved_path, os.fspath(root))
    return ".git" in relative.split(os.sep)
