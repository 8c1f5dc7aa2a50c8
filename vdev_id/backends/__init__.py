"""System backends used to resolve device locations"""

from .base import BaseBackend, DevicePathLookup, DeviceMapperLookup, MultipathLookup, SysfsReader
from .devmapper import DeviceMapperBackend
from .multipath import MultipathBackend
from .sysfs import SysfsBackend
from .udev import UdevBackend

__all__ = [
    "BaseBackend", "DevicePathLookup", "DeviceMapperLookup", "MultipathLookup", "SysfsReader",
    "DeviceMapperBackend", "MultipathBackend", "SysfsBackend", "UdevBackend",
]
