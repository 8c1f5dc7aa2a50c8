"""
vdev_id - udev helper naming SAS disks by channel and slot

This package resolves a block device to its HBA port and enclosure bay through
sysfs, and prints the ID_VDEV assignments udev uses to create
/dev/disk/by-vdev/<channel><slot> links.
"""

from .config import parse_config
from .models import Configuration, ResolvedLocation
from .vdev_id import VdevId

__version__ = "1.0.0"
__all__ = ["Configuration", "ResolvedLocation", "VdevId", "parse_config"]
