"""Resolution of the block device whose topology is examined"""

import logging
import re
from typing import Optional

from .backends import DeviceMapperLookup, MultipathLookup
from .models import DeviceDescriptor, ResolvedDevice

PARTITION_SUFFIX = re.compile(r'p(\d+)$')


def partition_suffix(dm_name: str, dev_type: Optional[str] = None) -> str:
    """Get the -partN suffix for a device-mapper partition name

    udev reports DEVTYPE=disk for device-mapper partitions, so the suffix is
    derived from the name unless udev already flagged a partition.
    """
    if dev_type == "partition":
        return ""
    match = PARTITION_SUFFIX.search(dm_name)
    if not match:
        return ""
    return f"-part{match.group(1)}"


def strip_partition(dm_name: str) -> str:
    """Remove a trailing pN from a device-mapper name (mpathap3 -> mpatha)"""
    return PARTITION_SUFFIX.sub("", dm_name)


class DeviceResolver:
    """Maps the device udev handed us to the SCSI disk to inspect"""

    def __init__(self, device_mapper: DeviceMapperLookup, multipath: MultipathLookup,
                 logger: Optional[logging.Logger] = None):
        """Initialize device resolver

        Args:
            device_mapper: Backend for dm-N to name lookups
            multipath: Backend listing multipath paths
            logger: Logger instance
        """
        self.device_mapper = device_mapper
        self.multipath = multipath
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, descriptor: DeviceDescriptor) -> Optional[ResolvedDevice]:
        """Resolve a device to the disk whose sysfs path identifies it

        Args:
            descriptor: Device and udev hints

        Returns:
            ResolvedDevice, or None when a multipath device cannot be resolved
        """
        if not descriptor.is_multipath:
            return ResolvedDevice(real_name=descriptor.raw_name)

        dm_name = descriptor.dm_name or self.device_mapper.dm_name(descriptor.raw_name)
        if not dm_name:
            self.logger.debug(f"No device-mapper name for {descriptor.raw_name}")
            return None

        suffix = partition_suffix(dm_name, descriptor.dev_type)

        base_name = strip_partition(dm_name)
        if not base_name:
            return None

        paths = self.multipath.running_paths(base_name)
        if not paths:
            self.logger.debug(f"No running paths for multipath device {base_name}")
            return None

        self.logger.debug(f"Using path {paths[0]} of {base_name} for {descriptor.raw_name}")
        return ResolvedDevice(real_name=paths[0], partition_suffix=suffix)
