"""sysfs reader"""

import os
from typing import List, Optional, Sequence

from .base import SysfsReader

SYSFS_ROOT = "/sys"


class SysfsBackend(SysfsReader):
    """Reads directories and attributes below a sysfs mount point"""

    def __init__(self, logger=None, root: str = SYSFS_ROOT):
        super().__init__(logger)
        self.root = root

    def _path(self, segments: Sequence[str]) -> str:
        return os.path.join(self.root, *segments)

    def list_entries(self, segments: Sequence[str]) -> List[str]:
        path = self._path(segments)
        try:
            return sorted(os.listdir(path))
        except OSError as e:
            self.logger.debug(f"Cannot list {path}: {e}")
            return []

    def read_attribute(self, segments: Sequence[str], name: str) -> Optional[str]:
        path = os.path.join(self._path(segments), name)
        try:
            with open(path, 'r') as f:
                return f.read().strip()
        except IOError as e:
            self.logger.debug(f"Cannot read {path}: {e}")
            return None
