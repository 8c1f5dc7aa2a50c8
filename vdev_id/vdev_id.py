"""Main VdevId class

Invoked by udev for each new block device, for example:

    KERNEL=="sd*", ENV{DEVTYPE}=="disk", IMPORT{program}="vdev_id -d %k"
    ENV{ID_VDEV}=="?*", SYMLINK+="$env{ID_VDEV_PATH}"
"""

import argparse
import dataclasses
import logging
import os
import sys
from typing import List, Mapping, Optional, TextIO

from .backends import (DeviceMapperBackend, DevicePathLookup, DeviceMapperLookup, MultipathBackend,
                       MultipathLookup, SysfsBackend, SysfsReader, UdevBackend)
from .config import ConfigLoader, DEFAULT_CONFIG_FILE
from .emitter import emit, format_alias
from .errors import VdevIdError
from .mapper import map_alias, map_channel, map_slot
from .models import Configuration, DeviceDescriptor, TOPOLOGIES
from .resolver import DeviceResolver
from .walker import TopologyWalker


def positive_int(value: str) -> int:
    """argparse type for phys per port"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is non-numeric")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"'{value}' must be positive")
    return number


class VdevId:
    """Main class for the vdev_id udev helper

    It wires the pipeline together:
    - Configuration loading and command line overrides
    - Multipath resolution to a running path
    - sysfs topology walk
    - Channel and slot mapping, then output for udev
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 udev: Optional[DevicePathLookup] = None,
                 sysfs: Optional[SysfsReader] = None,
                 device_mapper: Optional[DeviceMapperLookup] = None,
                 multipath: Optional[MultipathLookup] = None,
                 stream: Optional[TextIO] = None):
        """Initialize the VdevId instance

        Args:
            environ: udev event environment (DM_NAME, DEVTYPE, DEVLINKS)
            udev, sysfs, device_mapper, multipath: Backends, system ones by default
            stream: Output stream for the udev assignments
        """
        # Options
        self.config_file = DEFAULT_CONFIG_FILE
        self.device = None
        self.topology = None
        self.phys_per_port = None
        self.multipath = False
        self.verbose = False

        self.environ = os.environ if environ is None else environ
        self.stream = stream
        self.logger = self._setup_logger()

        # Components
        self.udev = udev or UdevBackend(logger=self.logger)
        self.sysfs = sysfs or SysfsBackend(logger=self.logger)
        self.device_mapper = device_mapper or DeviceMapperBackend(logger=self.logger)
        self.multipath_backend = multipath or MultipathBackend(logger=self.logger)

    def _setup_logger(self) -> logging.Logger:
        """Set up the logger for the application

        Records go to stderr; stdout is reserved for udev.
        """
        logger = logging.getLogger("vdev_id")
        logger.setLevel(logging.WARNING)

        if not logger.handlers:
            ch = logging.StreamHandler()
            ch.setLevel(logging.WARNING)

            formatter = logging.Formatter('[%(levelname)s] %(message)s')
            ch.setFormatter(formatter)

            logger.addHandler(ch)

        return logger

    def parse_arguments(self, argv: Optional[List[str]] = None) -> None:
        """Parse command line arguments"""
        parser = argparse.ArgumentParser(
            prog="vdev_id",
            description="Prints udev ID_VDEV assignments naming a SAS disk after its channel and slot."
        )

        parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_FILE, metavar="CONFIG",
                          help=f"Use an alternate config file (default {DEFAULT_CONFIG_FILE})")
        parser.add_argument("-d", "--device", required=True, metavar="DEVICE",
                          help="Device name, as passed by udev (e.g. sda)")
        parser.add_argument("-g", "--topology", choices=TOPOLOGIES,
                          help="Override the topology of the config file")
        parser.add_argument("-p", "--phys-per-port", type=positive_int, metavar="PHYS",
                          help="Override the number of phys per port of the config file")
        parser.add_argument("-m", "--multipath", action="store_true",
                          help="Treat the device as a multipath device")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

        args = parser.parse_args(argv)

        # Set instance variables
        self.config_file = args.config
        self.device = args.device
        if self.device.startswith("/dev/"):
            self.device = self.device[len("/dev/"):]
        self.topology = args.topology
        self.phys_per_port = args.phys_per_port
        self.multipath = args.multipath
        self.verbose = args.verbose

        # Configure logger
        if self.verbose:
            self.logger.setLevel(logging.DEBUG)
            for handler in self.logger.handlers:
                handler.setLevel(logging.DEBUG)

    def load_config(self) -> Optional[Configuration]:
        """Load the configuration file and apply command line overrides

        Returns:
            Configuration, or None when there is no configuration file
        """
        config = ConfigLoader(self.config_file, logger=self.logger).load()
        if config is None:
            return None

        overrides = {}
        if self.topology:
            overrides["topology"] = self.topology
        if self.phys_per_port:
            overrides["phys_per_port"] = self.phys_per_port
        if self.multipath:
            overrides["multipath"] = True

        return dataclasses.replace(config, **overrides)

    def get_alias(self, config: Configuration) -> Optional[str]:
        """Derive the alias of the device, None if it does not get one"""
        if config.aliases:
            alias = self._get_configured_alias(config)
            if alias:
                return alias

        descriptor = DeviceDescriptor(
            raw_name=self.device,
            is_multipath=config.multipath,
            dm_name=self.environ.get("DM_NAME") or None,
            dev_type=self.environ.get("DEVTYPE") or None,
        )

        resolver = DeviceResolver(self.device_mapper, self.multipath_backend, logger=self.logger)
        resolved = resolver.resolve(descriptor)
        if resolved is None:
            return None

        walker = TopologyWalker(self.udev, self.sysfs, logger=self.logger)
        location = walker.locate(resolved.real_name, config)
        if location is None:
            return None

        channel = map_channel(config, location.pci_id, location.port)
        if channel is None:
            self.logger.debug(f"{self.device} has no channel (pci_id={location.pci_id}, port={location.port})")
            return None

        slot = map_slot(config, location.slot, channel)
        return format_alias(channel, slot, resolved.partition_suffix)

    def _get_configured_alias(self, config: Configuration) -> Optional[str]:
        """Look the device up by its udev links in the alias table"""
        devlinks = self.environ.get("DEVLINKS")
        if devlinks:
            links = devlinks.split()
        else:
            links = self.udev.device_links(self.device)

        alias = map_alias(config, links)
        if alias is None:
            self.logger.debug(f"No alias configured for {self.device}")
        return alias

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point for the application"""
        # Parse arguments
        self.parse_arguments(argv)

        try:
            config = self.load_config()
            if config is None:
                self.logger.debug(f"No configuration at {self.config_file}, nothing to do")
                return

            alias = self.get_alias(config)

        except VdevIdError as e:
            self.logger.error(str(e))
            sys.exit(1)

        if alias:
            emit(alias, self.stream)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the vdev_id command line"""
    VdevId().run(argv)


if __name__ == '__main__':
    main()
