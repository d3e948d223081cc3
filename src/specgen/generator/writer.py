"""Write rendered output files into the destination directory.

Files are committed as a group. Every file is first staged as a temporary
file in the destination directory (so ``os.replace`` is an atomic rename on
POSIX systems), and only when all of them have been staged are they renamed
into place. If a rename fails, the files already committed in this run are
restored to their previous content (or removed if they did not exist), so a
run leaves either all new files or the previous state.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Mapping, Optional

from specgen.exceptions import OutputWriteError

logger = logging.getLogger(__name__)


def write_outputs(destination: str | Path, files: Mapping[str, str]) -> list[Path]:
    """Write *files* into *destination*, all or nothing.

    Args:
        destination: Output directory. Created (including parents) if it does
            not exist.
        files: Mapping of file name to text content, written in order.

    Returns:
        The paths written, in the order of *files*.

    Raises:
        OutputWriteError: If the directory cannot be created or any file
            cannot be staged or committed. The underlying :class:`OSError`
            is chained.
    """
    dest = Path(destination)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(f"Cannot create output directory {dest}: {exc}") from exc

    staged: list[tuple[Path, str]] = []
    try:
        for name, content in files.items():
            target = dest / name
            staged.append((target, _stage(target, content)))
    except OSError as exc:
        _discard(tmp for _, tmp in staged)
        raise OutputWriteError(f"Cannot write {dest / name}: {exc}") from exc

    committed: list[tuple[Path, Optional[bytes]]] = []
    for index, (target, tmp_path) in enumerate(staged):
        try:
            previous = target.read_bytes() if target.is_file() else None
            os.replace(tmp_path, target)
        except OSError as exc:
            _discard(tmp for _, tmp in staged[index:])
            _rollback(committed)
            raise OutputWriteError(f"Cannot write {target}: {exc}") from exc
        committed.append((target, previous))
        logger.debug("Wrote %s", target)

    return [target for target, _ in staged]


def _stage(path: Path, data: str) -> str:
    """Write *data* to a temp file next to *path* and return the temp file name.

    The temp file is removed again if writing fails.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        return tmp_path
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            _discard([tmp_path])
        raise


def _rollback(committed: list[tuple[Path, Optional[bytes]]]) -> None:
    """Restore files committed earlier in a failed run."""
    for target, previous in reversed(committed):
        try:
            if previous is None:
                target.unlink()
            else:
                target.write_bytes(previous)
        except OSError as exc:
            logger.warning("Could not restore %s: %s", target, exc)


def _discard(paths: Iterable[str]) -> None:
    for tmp_path in paths:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
