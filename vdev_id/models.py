"""Data models for vdev_id"""

from dataclasses import dataclass
from typing import Optional, Tuple

SAS_DIRECT = "sas_direct"
SAS_SWITCH = "sas_switch"
TOPOLOGIES = (SAS_DIRECT, SAS_SWITCH)

SLOT_SOURCES = ("bay", "phy", "port", "id", "lun")

DEFAULT_PHYS_PER_PORT = 4


@dataclass(frozen=True)
class ChannelEntry:
    """A raw `channel` row, interpreted against the topology at lookup time"""

    tokens: Tuple[str, ...]          # Tokens following the keyword

    def resolve(self, topology: str) -> Optional[Tuple[Optional[str], int, str]]:
        """Interpret the row for a topology

        Returns:
            (pci_id, port, name) where pci_id is None for sas_switch, or None
            when the row does not fit the topology
        """
        if topology == SAS_SWITCH:
            if len(self.tokens) != 2:
                return None
            pci_id = None
            port, name = self.tokens
        else:
            if len(self.tokens) != 3:
                return None
            pci_id, port, name = self.tokens

        try:
            return pci_id, int(port), name
        except ValueError:
            return None


@dataclass(frozen=True)
class SlotEntry:
    """A `slot` remapping row"""

    linux_slot: int                  # Slot number reported by the kernel
    mapped_slot: int                 # Slot number used in the alias
    channel: Optional[str] = None    # Restrict the row to one channel

    def matches(self, linux_slot: int, channel: Optional[str] = None) -> bool:
        if self.linux_slot != linux_slot:
            return False
        return self.channel is None or self.channel == channel


@dataclass(frozen=True)
class AliasEntry:
    """An `alias` row naming a device by one of its udev links"""

    name: str
    devlink: str


@dataclass(frozen=True)
class Configuration:
    """Parsed contents of vdev_id.conf"""

    topology: str = SAS_DIRECT
    phys_per_port: int = DEFAULT_PHYS_PER_PORT
    multipath: bool = False
    slot_source: str = "bay"
    channels: Tuple[ChannelEntry, ...] = ()
    slots: Tuple[SlotEntry, ...] = ()
    aliases: Tuple[AliasEntry, ...] = ()

    def to_dict(self) -> dict:
        """Convert configuration to dictionary representation"""
        return {
            "topology": self.topology,
            "phys_per_port": self.phys_per_port,
            "multipath": self.multipath,
            "slot_source": self.slot_source,
            "channels": [list(entry.tokens) for entry in self.channels],
            "slots": [(entry.linux_slot, entry.mapped_slot, entry.channel) for entry in self.slots],
            "aliases": [(entry.name, entry.devlink) for entry in self.aliases],
        }


@dataclass(frozen=True)
class DeviceDescriptor:
    """The device handed to us by udev"""

    raw_name: str                    # Kernel name (e.g., sda, dm-3)
    is_multipath: bool = False
    dm_name: Optional[str] = None    # DM_NAME from the udev event
    dev_type: Optional[str] = None   # DEVTYPE from the udev event


@dataclass(frozen=True)
class ResolvedDevice:
    """The block device whose sysfs path is walked"""

    real_name: str
    partition_suffix: str = ""


@dataclass(frozen=True)
class ResolvedLocation:
    """Physical location extracted from the sysfs device path"""

    pci_id: str                      # PCI bus:device.function of the HBA
    port: int                        # HBA or switch port
    phy: int                         # SAS phy number
    slot: int                        # Enclosure slot (per slot source)

    def to_dict(self) -> dict:
        """Convert location to dictionary representation"""
        return {
            "pci_id": self.pci_id,
            "port": self.port,
            "phy": self.phy,
            "slot": self.slot,
        }
