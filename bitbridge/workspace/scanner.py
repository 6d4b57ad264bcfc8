"""Discover the local scripts that a push-all uploads."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from loguru import logger

from bitbridge.utils.exceptions import FilesystemError

DEFAULT_BRIDGE_DIR = "file-manager"
DEFAULT_EXTENSION = ".js"


@dataclass(frozen=True)
class ScriptFile:
    filename: str
    content: str


def remote_filename(path: Path, root: Path) -> str:
    """Path relative to the project root, forward slashes, no leading separator."""
    return path.relative_to(root).as_posix().lstrip("/")


def walk_scripts(
    root: Path,
    *,
    bridge_dir_name: str = DEFAULT_BRIDGE_DIR,
    extension: str = DEFAULT_EXTENSION,
) -> Iterator[Path]:
    """Lazily yield eligible script paths under root, in a stable order.

    The bridge's own directory (``root / bridge_dir_name``) is pruned so its
    sources are never uploaded.
    """
    root = Path(root)
    skip = (root / bridge_dir_name).resolve() if bridge_dir_name else None

    def _raise(err: OSError) -> None:
        raise FilesystemError(str(err.filename or root), err.strerror or str(err)) from err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        current = Path(dirpath)
        if skip is not None:
            dirnames[:] = [d for d in dirnames if (current / d).resolve() != skip]
        dirnames.sort()
        for name in sorted(filenames):
            path = current / name
            if path.suffix != extension:
                continue
            if not path.is_file():
                continue
            yield path


def collect_scripts(
    root: Path,
    *,
    bridge_dir_name: str = DEFAULT_BRIDGE_DIR,
    extension: str = DEFAULT_EXTENSION,
) -> list[ScriptFile]:
    """Read every eligible script up front.

    Any enumeration or read failure aborts the whole batch with FilesystemError,
    so a push never goes out partially.
    """
    root = Path(root)
    if not root.is_dir():
        raise FilesystemError(str(root), "project root is not a directory")
    scripts: list[ScriptFile] = []
    for path in walk_scripts(root, bridge_dir_name=bridge_dir_name, extension=extension):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(str(path), str(e)) from e
        scripts.append(ScriptFile(filename=remote_filename(path, root), content=content))
    logger.debug(f"Collected {len(scripts)} script(s) under {root}")
    return scripts
