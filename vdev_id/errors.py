"""Exceptions raised by vdev_id"""


class VdevIdError(Exception):
    """Base class for errors the operator has to fix"""
    pass


class ConfigError(VdevIdError):
    """Raised for configuration values that cannot be interpreted"""
    pass
