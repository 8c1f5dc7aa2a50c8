"""Base backend abstractions"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import logging
import subprocess


class BaseBackend(ABC):
    """Base class for the system facilities vdev_id reads from"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize the backend

        Args:
            logger: Logger instance for output
        """
        self.logger = logger or logging.getLogger(__name__)

    # Helper methods that can be used by all backends

    def _execute_command(self, cmd: List[str], decode_method: str = 'utf-8') -> str:
        """Execute a command and return its output

        Args:
            cmd: Command to execute as list of strings
            decode_method: Method to decode command output

        Returns:
            str: Command output as string, empty if the command fails or cannot be started
        """
        self.logger.debug(f"Executing command: {' '.join(cmd)}")

        try:
            output_bytes = subprocess.check_output(cmd, stderr=subprocess.DEVNULL)

            try:
                output = output_bytes.decode(decode_method)
            except UnicodeDecodeError:
                self.logger.debug(f"{decode_method} decoding failed, falling back to latin-1")
                output = output_bytes.decode('latin-1')

            return output

        except (subprocess.CalledProcessError, OSError) as e:
            self.logger.debug(f"Error executing command {' '.join(cmd)}: {e}")
            return ""


class DevicePathLookup(BaseBackend):
    """Looks up udev information for block devices"""

    @abstractmethod
    def device_path(self, name: str) -> Optional[str]:
        """Get the kernel device path (e.g., /devices/pci0000:00/.../block/sda)

        Returns:
            Device path or None if the device is unknown
        """
        pass

    @abstractmethod
    def device_links(self, name: str) -> List[str]:
        """Get the /dev symlinks udev created for a block device"""
        pass


class DeviceMapperLookup(BaseBackend):
    """Reverse lookup of device-mapper names"""

    @abstractmethod
    def dm_name(self, device: str) -> Optional[str]:
        """Get the device-mapper name of a dm-N device, or None"""
        pass


class MultipathLookup(BaseBackend):
    """Queries the multipath topology of a device-mapper device"""

    @abstractmethod
    def running_paths(self, name: str) -> List[str]:
        """Get the block device names of all paths in running state, in listing order"""
        pass


class SysfsReader(BaseBackend):
    """Read-only access to the sysfs tree"""

    @abstractmethod
    def list_entries(self, segments: Sequence[str]) -> List[str]:
        """List the entries of a sysfs directory, sorted by name; empty if missing"""
        pass

    @abstractmethod
    def read_attribute(self, segments: Sequence[str], name: str) -> Optional[str]:
        """Read a sysfs attribute file, stripped; None if missing or unreadable"""
        pass
