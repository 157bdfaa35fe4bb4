"""Find a file by exact name in an extracted tree."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def find_file(root_dir: Path, name: str) -> Path | None:
    """
    Depth-first search for the first regular file called ``name``.

    Sibling order is whatever the filesystem listing returns, so with several
    matches the first one met wins. Returns None when nothing matches.
    """
    try:
        entries = list(os.scandir(root_dir))
    except OSError as e:
        logger.debug(f"Cannot list {root_dir}: {e}")
        return None

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            found = find_file(Path(entry.path), name)
            if found is not None:
                return found
        elif entry.name == name and entry.is_file():
            return Path(entry.path)

    return None
