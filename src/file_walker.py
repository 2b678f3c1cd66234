import os
import logging
from typing import Callable, List, Optional, Set

logger = logging.getLogger(__name__)


def walk_files(
    root: str, on_error: Optional[Callable[[OSError], None]] = None
) -> List[str]:
    """
    Recursively collects every regular file under root, symlinks to files included.

    Entries are visited in name order so the result is reproducible. Symlinked
    directories are followed, each canonical directory is entered at most once.

    An unreadable root always raises OSError. An unreadable nested directory is
    handed to on_error and skipped, or re-raised when no callback is given.
    """

    results: List[str] = []
    visited: Set[str] = set()
    _walk(os.path.abspath(root), results, visited, on_error, is_root=True)
    return results


def _walk(
    directory: str,
    results: List[str],
    visited: Set[str],
    on_error: Optional[Callable[[OSError], None]],
    is_root: bool = False,
) -> None:
    real_path = os.path.realpath(directory)
    if real_path in visited:
        logger.debug(f"Skipping already visited directory: {directory}")
        return
    visited.add(real_path)

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        if is_root or on_error is None:
            raise
        logger.warning(f"Could not read directory: {directory}: {e}")
        on_error(e)
        return

    for entry in entries:
        try:
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError:
            is_dir = is_file = False

        if is_dir:
            _walk(entry.path, results, visited, on_error)
        elif is_file:
            results.append(entry.path)
        else:
            # fifos, sockets, devices and dangling links
            logger.debug(f"Skipping non-regular entry: {entry.path}")
