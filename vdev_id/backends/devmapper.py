"""Device-mapper name lookup"""

import os
from typing import Optional

from .base import DeviceMapperLookup

DEV_MAPPER_DIR = "/dev/mapper"


class DeviceMapperBackend(DeviceMapperLookup):
    """Finds the /dev/mapper entry that points at a dm-N device"""

    def __init__(self, logger=None, mapper_dir: str = DEV_MAPPER_DIR):
        super().__init__(logger)
        self.mapper_dir = mapper_dir

    def dm_name(self, device: str) -> Optional[str]:
        """Get the device-mapper name for device (e.g., dm-3 -> mpatha)"""
        try:
            entries = sorted(os.listdir(self.mapper_dir))
        except OSError as e:
            self.logger.debug(f"Cannot list {self.mapper_dir}: {e}")
            return None

        for entry in entries:
            if entry == "control":
                continue
            target = os.path.realpath(os.path.join(self.mapper_dir, entry))
            if os.path.basename(target) == device:
                self.logger.debug(f"{device} is device-mapper device {entry}")
                return entry

        return None
