# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Flat upload directory – raw bytes only, metadata lives in the repository."""

from pathlib import Path
from typing import Optional


class FileStorage:
    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, stored_name: str) -> Optional[Path]:
        """
        Map *stored_name* to a path inside the upload directory, or None if
        it is not a plain file name (separators, "..", empty).
        """
        if not stored_name or stored_name in (".", ".."):
            return None
        if "/" in stored_name or "\\" in stored_name or "\x00" in stored_name:
            return None
        return self.root / stored_name

    def write(self, stored_name: str, data: bytes) -> Path:
        path = self.path_for(stored_name)
        if path is None:
            raise ValueError(f"Invalid stored name: {stored_name!r}")
        # "x": never overwrite an existing upload
        fh = open(path, "xb")
        try:
            with fh:
                fh.write(data)
        except Exception:
            # No partial file may stay behind to be downloaded
            path.unlink(missing_ok=True)
            raise
        return path

    def delete(self, stored_name: str) -> bool:
        """Remove the bytes.  False if they were already gone."""
        path = self.path_for(stored_name)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True
