"""
Per-invocation scratch directories.

Each embed/extract call works in its own directory, named from the job id
and a nanosecond timestamp, and the directory is removed on every exit path.
"""

import logging
import os
import shutil
import tempfile
import time
from contextlib import contextmanager
from typing import Iterator, Optional


logger = logging.getLogger(__name__)

DEFAULT_SCRATCH_DIRNAME = "vidchain"


def default_scratch_root() -> str:
    return os.path.join(tempfile.gettempdir(), DEFAULT_SCRATCH_DIRNAME)


@contextmanager
def scratch_directory(root: Optional[str], prefix: str, job_id: str) -> Iterator[str]:
    """
    Create a uniquely named directory and remove it on exit.

    Args:
        root: Parent directory (system temp dir / vidchain if None)
        prefix: Operation name, e.g. "watermark" or "extract"
        job_id: Caller-supplied or generated job identifier

    Yields:
        Absolute path of the new directory
    """
    root = root if root is not None else default_scratch_root()
    os.makedirs(root, exist_ok=True)

    path = os.path.abspath(os.path.join(root, f"{prefix}_{job_id}_{time.time_ns()}"))
    os.makedirs(path)
    logger.debug(f"Created scratch directory {path}")

    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        if os.path.exists(path):
            logger.warning(f"Scratch directory could not be removed: {path}")
