"""Extraction of the physical location of a disk from its sysfs device path

A SAS disk attached directly to an HBA has a device path such as:

    /devices/pci0000:80/0000:80:03.0/0000:85:00.0/host0/port-0:1/
        end_device-0:1/target0:0:1/0:0:1:0/block/sdb

The segment before `host0` carries the PCI address of the HBA, the directory
one level below the host (four levels with a SAS switch in between) holds the
phy links of the port, and the `end_device-*` segment leads to the SAS device
attributes with the enclosure bay.
"""

import logging
import re
from typing import List, Optional, Sequence

from .backends import DevicePathLookup, SysfsReader
from .models import Configuration, ResolvedLocation, SAS_DIRECT, SAS_SWITCH

HOST_SEGMENT = re.compile(r'^host\d+$')

# Levels below hostN where the port directory lives
PORT_DEPTH = {
    SAS_DIRECT: 1,
    SAS_SWITCH: 4,
}

SLOT_ATTRIBUTES = {
    "bay": "bay_identifier",
    "phy": "phy_identifier",
}

# Offset from the end_device segment of the segment whose suffix is the slot
SLOT_SEGMENT_OFFSETS = {
    "port": 0,    # end_device-0:1
    "id": 1,      # target0:0:1
    "lun": 2,     # 0:0:1:0
}


def split_device_path(path: str) -> List[str]:
    """Split a device path into its non-empty segments"""
    return [segment for segment in path.split('/') if segment]


def find_host_index(segments: Sequence[str]) -> Optional[int]:
    """Get the index of the first hostN segment"""
    for i, segment in enumerate(segments):
        if HOST_SEGMENT.match(segment):
            return i
    return None


def pci_id_from_segment(segment: str) -> Optional[str]:
    """Get bus:device.function from a PCI address segment (0000:85:00.0 -> 85:00.0)"""
    fields = segment.split(':')
    if len(fields) < 3:
        return None
    return ':'.join(fields[1:3])


def segment_number(segment: str) -> Optional[int]:
    """Get the number after the last colon of a segment (phy-0:5 -> 5)"""
    try:
        return int(segment.rsplit(':', 1)[-1])
    except ValueError:
        return None


def phy_from_entries(entries: Sequence[str]) -> Optional[int]:
    """Get the phy number of the first phy* entry of a port directory"""
    for entry in entries:
        if entry.startswith("phy"):
            return segment_number(entry)
    return None


def find_end_device_index(segments: Sequence[str], start: int) -> Optional[int]:
    """Get the index of the first end_device* segment at or after start"""
    for i in range(start, len(segments)):
        if segments[i].startswith("end_device"):
            return i
    return None


class TopologyWalker:
    """Resolves a block device to its HBA, port and enclosure slot"""

    def __init__(self, udev: DevicePathLookup, sysfs: SysfsReader,
                 logger: Optional[logging.Logger] = None):
        """Initialize topology walker

        Args:
            udev: Backend giving device paths of block devices
            sysfs: Backend reading the sysfs tree
            logger: Logger instance
        """
        self.udev = udev
        self.sysfs = sysfs
        self.logger = logger or logging.getLogger(__name__)

    def get_device_path(self, device: str) -> Optional[str]:
        """Get the device path of a block device name, or pass a device path through"""
        if device.startswith("/sys/devices/"):
            device = device[len("/sys"):]
        if device.startswith("/devices/"):
            return device
        return self.udev.device_path(device)

    def locate(self, device: str, config: Configuration) -> Optional[ResolvedLocation]:
        """Find the physical location of a disk

        Args:
            device: Block device name or kernel device path
            config: Configuration supplying topology, phys per port and slot source

        Returns:
            ResolvedLocation, or None when any part of the location is missing
        """
        device_path = self.get_device_path(device)
        if not device_path:
            self.logger.debug(f"No device path for {device}")
            return None

        segments = split_device_path(device_path)
        self.logger.debug(f"Device path of {device}: {device_path}")

        host_index = find_host_index(segments)
        if not host_index:
            self.logger.debug(f"{device} is not below a SCSI host")
            return None

        pci_id = pci_id_from_segment(segments[host_index - 1])
        if pci_id is None:
            self.logger.debug(f"{segments[host_index - 1]} is not a PCI address")
            return None

        port_end = host_index + 1 + PORT_DEPTH[config.topology]
        if port_end > len(segments):
            return None

        phy = phy_from_entries(self.sysfs.list_entries(segments[:port_end]))
        if phy is None:
            self.logger.debug(f"No phy found below {'/'.join(segments[:port_end])}")
            return None

        port = phy // config.phys_per_port

        slot = self._get_slot(segments, port_end, config.slot_source)
        if slot is None:
            self.logger.debug(f"No {config.slot_source} slot found for {device}")
            return None

        location = ResolvedLocation(pci_id=pci_id, port=port, phy=phy, slot=slot)
        self.logger.debug(f"Location of {device}: {location.to_dict()}")
        return location

    def _get_slot(self, segments: List[str], start: int, slot_source: str) -> Optional[int]:
        """Read the slot number below the end device following the port directory"""
        end_index = find_end_device_index(segments, start)
        if end_index is None:
            return None

        if slot_source in SLOT_ATTRIBUTES:
            end_device = segments[end_index]
            sas_device = segments[:end_index + 1] + ["sas_device", end_device]
            value = self.sysfs.read_attribute(sas_device, SLOT_ATTRIBUTES[slot_source])
            if not value:
                return None
            try:
                return int(value)
            except ValueError:
                return None

        index = end_index + SLOT_SEGMENT_OFFSETS[slot_source]
        if index >= len(segments):
            return None
        return segment_number(segments[index])
