"""Output writing.

Generated modules are written atomically: the text goes to a sibling temp
file which then replaces the target, so a failed run never leaves a
truncated module behind.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from cdpgen.domain.errors import OutputWriteError


def write_output(path: Path, text: str) -> Path:
    """Write *text* to *path* atomically, creating parent directories.

    Returns the resolved path that was written.

    Raises:
        OutputWriteError: The directory or the target could not be written.
    """
    path = path.expanduser()
    try:
        _replace(path, text)
    except OSError as exc:
        msg = f"Could not write output: {exc.strerror or exc}"
        raise OutputWriteError(msg, path=str(path)) from exc
    return path.resolve()


def _replace(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
