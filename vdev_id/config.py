"""Configuration loading for vdev_id"""

import logging
import os
from typing import Iterable, List, Optional

from .errors import ConfigError
from .models import (AliasEntry, ChannelEntry, Configuration, SlotEntry,
                     DEFAULT_PHYS_PER_PORT, SAS_DIRECT, SLOT_SOURCES, TOPOLOGIES)

DEFAULT_CONFIG_FILE = "/etc/zfs/vdev_id.conf"


class ConfigLoader:
    """Loads vdev_id.conf into an immutable Configuration"""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE, logger: Optional[logging.Logger] = None):
        """Initialize configuration loader

        Args:
            config_file: Path to configuration file
            logger: Logger instance
        """
        self.config_file = os.path.expanduser(config_file)
        self.logger = logger or logging.getLogger(__name__)

    def load(self) -> Optional[Configuration]:
        """Load configuration from file

        Configuration file structure:
        ```
        multipath     no
        topology      sas_direct
        phys_per_port 4
        slot          bay

        #       PCI_ID  HBA PORT  CHANNEL NAME
        channel 85:00.0 1         A
        channel 85:00.0 0         B

        #    Linux   Mapped  [Channel]
        slot 1       7
        slot 2       10      A

        #     Name  Devlink
        alias d1    /dev/disk/by-id/wwn-0x5000c5002de3b9ca
        ```

        Returns:
            Configuration, or None when the file cannot be read

        Raises:
            ConfigError: For values that cannot be interpreted
        """
        try:
            with open(self.config_file, 'r') as f:
                lines = f.readlines()
        except IOError as e:
            self.logger.debug(f"Cannot read configuration file {self.config_file}: {e}")
            return None

        self.logger.debug(f"Loading configuration from {self.config_file}")
        return parse_lines(lines, logger=self.logger)


def parse_config(path: str, logger: Optional[logging.Logger] = None) -> Optional[Configuration]:
    """Parse a configuration file, None if it does not exist or is unreadable"""
    return ConfigLoader(path, logger=logger).load()


def parse_lines(lines: Iterable[str], logger: Optional[logging.Logger] = None) -> Configuration:
    """Build a Configuration from the lines of a configuration file

    Scalar keywords take effect from their first occurrence; table keywords
    append one row per line. Anything else is ignored.
    """
    logger = logger or logging.getLogger(__name__)

    topology = None
    phys_per_port = None
    multipath = None
    slot_source = None
    channels: List[ChannelEntry] = []
    slots: List[SlotEntry] = []
    aliases: List[AliasEntry] = []

    for line in lines:
        tokens = line.split('#', 1)[0].split()
        if len(tokens) < 2:
            continue

        keyword, args = tokens[0], tokens[1:]

        if keyword == "topology":
            if topology is None:
                topology = _parse_topology(args[0])
        elif keyword == "phys_per_port":
            if phys_per_port is None:
                phys_per_port = _parse_phys_per_port(args[0])
        elif keyword == "multipath":
            if multipath is None:
                multipath = args[0] == "yes"
        elif keyword == "channel":
            channels.append(ChannelEntry(tuple(args)))
        elif keyword == "slot":
            if len(args) == 1:
                if args[0] not in SLOT_SOURCES:
                    logger.debug(f"Ignoring unsupported slot source: {args[0]}")
                elif slot_source is None:
                    slot_source = args[0]
            else:
                entry = _parse_slot_entry(args)
                if entry:
                    slots.append(entry)
                else:
                    logger.debug(f"Ignoring slot line: {line.strip()}")
        elif keyword == "alias":
            if len(args) >= 2:
                aliases.append(AliasEntry(name=args[0], devlink=args[1]))

    config = Configuration(
        topology=topology or SAS_DIRECT,
        phys_per_port=phys_per_port or DEFAULT_PHYS_PER_PORT,
        multipath=bool(multipath),
        slot_source=slot_source or "bay",
        channels=tuple(channels),
        slots=tuple(slots),
        aliases=tuple(aliases),
    )
    logger.debug(f"Configuration: {config.to_dict()}")
    return config


def _parse_topology(value: str) -> str:
    if value not in TOPOLOGIES:
        raise ConfigError(f"Unknown topology '{value}' (expected one of: {', '.join(TOPOLOGIES)})")
    return value


def _parse_phys_per_port(value: str) -> int:
    try:
        phys_per_port = int(value)
    except ValueError:
        raise ConfigError(f"phys_per_port value '{value}' is non-numeric")
    if phys_per_port <= 0:
        raise ConfigError(f"phys_per_port value '{value}' must be positive")
    return phys_per_port


def _parse_slot_entry(args: List[str]) -> Optional[SlotEntry]:
    try:
        linux_slot = int(args[0])
        mapped_slot = int(args[1])
    except ValueError:
        return None
    channel = args[2] if len(args) > 2 else None
    return SlotEntry(linux_slot=linux_slot, mapped_slot=mapped_slot, channel=channel)
