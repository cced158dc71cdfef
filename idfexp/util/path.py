"""
Path helpers for scripts: :func:`idfexp.util.path.expand_environment_variables`
expands ``%NAME%`` references, :func:`idfexp.util.path.resolve_path` resolves
script paths against the base path and :func:`idfexp.util.path.count_files`
counts the files matched by a ``count()`` loop bound.
"""

import fnmatch
import os
import pathlib
from typing import Optional, Union

PathLike = Union[str, pathlib.Path]


def _lookup_environment_variable(name: str) -> Optional[str]:
    if name in os.environ:
        return os.environ[name]
    # Names are case-insensitive in scripts written for Windows
    upper = name.upper()
    for key, value in os.environ.items():
        if key.upper() == upper:
            return value
    return None


def expand_environment_variables(text: str) -> str:
    """
    Replace ``%NAME%`` references by the value of environment variable NAME.

    References to undefined variables are left untouched, the closing ``%`` of
    such a reference may start the next reference. ``%%`` is never expanded,
    such that loop index references like ``%%i`` survive.

    Parameters
    ----------
    text: str

    Returns
    -------
    expanded: str

    Examples
    --------
    >>> os.environ["MODEL"] = "c:/model"
    >>> expand_environment_variables("%MODEL%/top.idf")
    'c:/model/top.idf'
    """
    parts = []
    position = 0
    while True:
        start = text.find("%", position)
        if start == -1:
            break
        end = text.find("%", start + 1)
        if end == -1:
            break
        name = text[start + 1 : end]
        value = _lookup_environment_variable(name) if name else None
        if value is None:
            parts.append(text[position:end])
            position = end
        else:
            parts.append(text[position:start])
            parts.append(value)
            position = end + 1
    parts.append(text[position:])
    return "".join(parts)


def to_path(path: PathLike) -> pathlib.Path:
    """Convert a script path, which may use backslashes, to a pathlib.Path"""
    return pathlib.Path(str(path).replace("\\", "/"))


def resolve_path(path: PathLike, base_path: Optional[PathLike] = None) -> pathlib.Path:
    """
    Resolve a (relative) path from a script against the base path.

    Absolute paths are returned as is. Without a base path, relative paths are
    relative to the current working directory.
    """
    path = to_path(path)
    if path.is_absolute() or base_path is None:
        return path
    return pathlib.Path(base_path) / path


def count_files(path: PathLike, pattern: str = "*") -> int:
    """
    Count the files in a directory of which the name matches a glob pattern.

    Matching is case-insensitive. Subdirectories are not counted.

    Parameters
    ----------
    path: str or pathlib.Path
        Directory to count files in.
    pattern: str, default "*"
        Glob pattern for the file names.

    Returns
    -------
    count: int
    """
    path = pathlib.Path(path)
    if not path.is_dir():
        raise NotADirectoryError(f"Directory does not exist: {path}")
    pattern = pattern.lower()
    return sum(
        1
        for child in path.iterdir()
        if child.is_file() and fnmatch.fnmatch(child.name.lower(), pattern)
    )


def add_postfix(path: PathLike, postfix: str) -> pathlib.Path:
    """
    Add a postfix to the file name, before the extension.

    >>> add_postfix("scripts/run.ini", "_expanded")
    PosixPath('scripts/run_expanded.ini')
    """
    path = pathlib.Path(path)
    return path.with_name(f"{path.stem}{postfix}{path.suffix}")
