from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from ..errors import DocumentIOError

PathLike = Union[str, Path]


def check_readable(path: PathLike, max_file_size_mb: int = 0) -> int:
    """Return the file size, raising :class:`DocumentIOError` if unusable.

    ``max_file_size_mb`` of 0 disables the size limit.
    """
    try:
        st = os.stat(path)
    except OSError as exc:
        raise DocumentIOError(f"{path}: {exc.strerror or exc}") from exc

    if not Path(path).is_file():
        raise DocumentIOError(f"{path}: not a regular file")
    if not os.access(path, os.R_OK):
        raise DocumentIOError(f"{path}: permission denied")
    if max_file_size_mb and st.st_size > max_file_size_mb * 1024 * 1024:
        raise DocumentIOError(f"{path}: {st.st_size} bytes exceeds the {max_file_size_mb} MB limit")
    return st.st_size


def read_document_bytes(path: PathLike) -> bytes:
    """Read the whole file; its length is the document's recorded size."""
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as exc:
        raise DocumentIOError(f"{path}: {exc.strerror or exc}") from exc
