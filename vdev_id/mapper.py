"""Lookups from physical location to channel and slot names"""

import logging
from typing import Iterable, Optional

from .models import Configuration

logger = logging.getLogger(__name__)


def map_slot(config: Configuration, linux_slot: int, channel: Optional[str] = None) -> int:
    """Translate a kernel slot number using the slot table

    Args:
        config: Parsed configuration
        linux_slot: Slot number read from sysfs
        channel: Channel the device belongs to, for channel-specific rows

    Returns:
        The mapped slot of the first matching row, else linux_slot unchanged
    """
    for entry in config.slots:
        if entry.matches(linux_slot, channel):
            logger.debug(f"Slot {linux_slot} mapped to {entry.mapped_slot}")
            return entry.mapped_slot
    return linux_slot


def map_channel(config: Configuration, pci_id: str, port: int) -> Optional[str]:
    """Find the channel name for a PCI id and port

    sas_switch rows match on port alone; sas_direct rows need both the PCI id
    and the port to match.

    Returns:
        Channel name of the first matching row, or None
    """
    for entry in config.channels:
        resolved = entry.resolve(config.topology)
        if resolved is None:
            continue

        entry_pci_id, entry_port, name = resolved
        if entry_port != port:
            continue
        if entry_pci_id is not None and entry_pci_id != pci_id:
            continue

        return name

    logger.debug(f"No channel configured for pci_id={pci_id} port={port} ({config.topology})")
    return None


def map_alias(config: Configuration, device_links: Iterable[str]) -> Optional[str]:
    """Find the alias name for a device given its udev links

    Returns:
        Name of the first alias row whose devlink belongs to the device, or None
    """
    links = {_normalize_link(link) for link in device_links}

    for entry in config.aliases:
        if _normalize_link(entry.devlink) in links:
            return entry.name

    return None


def _normalize_link(link: str) -> str:
    link = link.strip()
    if link.startswith("/dev/"):
        link = link[len("/dev/"):]
    return link
