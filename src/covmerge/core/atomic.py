"""Atomic file replacement."""

import os
import tempfile
from pathlib import Path


def _default_mode() -> int:
    # os.umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write(path: Path, payload: bytes) -> None:
    """Replace ``path`` with ``payload`` in one rename.

    The data goes to a temporary file next to ``path`` first, so readers see
    either the old or the new content, and a failure leaves the old file in
    place. The new file gets the permissions a plain ``open()`` would create.

    Raises:
        OSError: If the temporary file cannot be written or moved.
    """
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
        os.chmod(tmp_name, _default_mode())
        os.replace(tmp_name, path)
    except OSError:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise
