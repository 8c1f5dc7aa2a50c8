"""Block device lookups through the udev database"""

from typing import List, Optional

from pyudev import Context, Devices, DeviceNotFoundError

from .base import DevicePathLookup


class UdevBackend(DevicePathLookup):
    """Resolves block devices with pyudev"""

    def __init__(self, logger=None, context: Optional[Context] = None):
        """Initialize UdevBackend

        Args:
            logger: Logger instance
            context: pyudev context, created on first use when omitted
        """
        super().__init__(logger)
        self._context = context

    @property
    def context(self) -> Context:
        if self._context is None:
            self._context = Context()
        return self._context

    def _get_block_device(self, name: str):
        try:
            return Devices.from_name(self.context, 'block', name)
        except DeviceNotFoundError as e:
            self.logger.debug(f"Block device {name} not found: {e}")
            return None

    def device_path(self, name: str) -> Optional[str]:
        """Get the kernel device path of block device name"""
        device = self._get_block_device(name)
        if device is None:
            return None
        return device.device_path

    def device_links(self, name: str) -> List[str]:
        """Get the symlinks udev created for block device name"""
        device = self._get_block_device(name)
        if device is None:
            return []
        return list(device.device_links)
