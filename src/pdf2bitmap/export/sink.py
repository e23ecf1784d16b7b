"""Output sink: PNG encoding and crash-safe persistence.

Files are written next to their target under a temporary name and moved
into place with :func:`os.replace`, so a failed write never leaves a
truncated PNG at the target path.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

from PIL import Image

from ..errors import EncodeError, WriteError

log = logging.getLogger(__name__)


def encode_png(image: Image.Image, compress_level: int = 6) -> bytes:
    """Encode *image* as PNG bytes.

    Raises
    ------
    EncodeError
        When Pillow cannot encode the image.
    """
    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG", compress_level=compress_level)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Error encoding PNG: {exc}") from exc
    return buf.getvalue()


def synthesize_filename(page_index: int, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"page_{page_index}_{timestamp_ms}.png"


def resolve_output_path(
    output_path: Optional[str | Path], page_index: int, cache_dir: Path
) -> Path:
    """Return the target path for a rendered page.

    An explicit *output_path* is used verbatim.  Otherwise a
    ``page_<index>_<ms>.png`` name under *cache_dir* is synthesized; the
    timestamp is bumped while the name is taken.
    """
    if output_path is not None:
        return Path(output_path)

    stamp = time.time_ns() // 1_000_000
    target = Path(cache_dir) / synthesize_filename(page_index, stamp)
    while target.exists():
        stamp += 1
        target = Path(cache_dir) / synthesize_filename(page_index, stamp)
    return target


def write_atomic(data: bytes, target: Path | str) -> Path:
    """Write *data* to *target*, creating parent directories.

    Raises
    ------
    WriteError
        When the directory cannot be created or the write / rename
        fails.  Nothing is left behind at *target* in that case.
    """
    target = Path(target)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"Cannot create directory {target.parent}: {exc}") from exc

    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        raise WriteError(f"Error writing {target}: {exc}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                log.warning("Could not remove partial output %s", tmp_name)
    return target
