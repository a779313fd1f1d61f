# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# winereg/core/file_ops.py
"""
Atomic file operation utilities.

Hive files are rewritten as a whole; writing to a sibling temporary file
and renaming it over the target means a failed export never leaves a
half-written hive behind.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional


@contextmanager
def atomic_write(
    target_path: Path,
    *,
    suffix: str = ".part",
    dir: Optional[Path] = None,
) -> Generator[Path, None, None]:
    """
    Context manager for atomic file writes using temporary file + rename.

    Creates a temporary file, yields its path for writing, then atomically
    renames it to the target path on success. Cleans up temp file on failure.

    Example:
        with atomic_write(Path("user.reg")) as temp_path:
            with open(temp_path, "w", encoding="utf-8", newline="\\n") as f:
                f.write(text)
    """
    target_path = Path(target_path)
    temp_dir = Path(dir) if dir else target_path.parent
    temp_dir.mkdir(parents=True, exist_ok=True)

    # Same directory as target so the rename stays on one filesystem.
    fd, temp_name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f".{target_path.name}.",
        dir=str(temp_dir),
    )
    temp_path = Path(temp_name)

    try:
        os.close(fd)
        yield temp_path
        os.replace(temp_path, target_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
