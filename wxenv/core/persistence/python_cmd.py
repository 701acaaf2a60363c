"""
Pinned-command persistence — the write-once ``.python_cmd`` file.

The file holds a single line: the command line downstream tooling
(Makefile, kernel registration) uses to run the resolved interpreter,
e.g. ``python3.11`` or ``py -3.11``.

Writes are atomic and exclusive: content goes to a temp file in the
same directory, which is then hard-linked into place.  ``os.link``
fails if the target exists, so an existing file is never replaced,
even by a concurrent run.  Filesystems without hard links fall back
to an exclusive ``open(path, "x")``, which keeps the never-replace
guarantee but not atomicity.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PYTHON_CMD_FILE = ".python_cmd"


def read_pinned_command(path: Path) -> str | None:
    """Return the first non-empty line of *path*, or None if absent/empty."""
    if not path.is_file():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None
    for line in raw.splitlines():
        line = line.strip()
        if line:
            return line
    return None


def read_python_cmd(install_root: Path) -> str | None:
    """The interpreter command pinned for *install_root*, if any."""
    return read_pinned_command(install_root / PYTHON_CMD_FILE)


def _create_exclusive(path: Path, content: str) -> bool:
    """Create *path* holding *content*; False if it already exists."""
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".wxenv_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        try:
            os.link(tmp, path)
            return True
        except FileExistsError:
            return False
        except OSError as e:
            # FAT/exFAT and some network mounts have no hard links
            logger.debug("Hard link into %s failed (%s), using exclusive open", path, e)
    finally:
        tmp.unlink(missing_ok=True)

    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(content)
    except FileExistsError:
        return False
    return True


def persist_command(path: Path, command_line: str) -> tuple[bool, str]:
    """Write *command_line* to *path* unless the file already exists.

    Args:
        path: Target file.
        command_line: Single-line command to pin.

    Returns:
        ``(written, content)``.  When the file already existed,
        ``written`` is False and ``content`` is the existing command
        (which stays authoritative).

    Raises:
        OSError: The install root is not writable.
    """
    existing = read_pinned_command(path)
    if path.exists():
        logger.info("%s already exists (%s), leaving it unchanged", path, existing)
        return False, existing or ""

    path.parent.mkdir(parents=True, exist_ok=True)

    if not _create_exclusive(path, command_line + "\n"):
        # Lost the race to another run; its content wins
        existing = read_pinned_command(path) or ""
        logger.info("%s was created concurrently (%s), keeping it", path, existing)
        return False, existing

    logger.info("Pinned %s → %s", command_line, path)
    return True, command_line
