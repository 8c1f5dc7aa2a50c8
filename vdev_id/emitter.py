"""udev output of the alias"""

import sys
from typing import Optional, TextIO

VDEV_PATH_PREFIX = "disk/by-vdev"


def format_alias(channel: str, slot: int, partition_suffix: str = "") -> str:
    """Build the alias from channel name, slot number and partition suffix"""
    return f"{channel}{slot}{partition_suffix}"


def emit(alias: str, stream: Optional[TextIO] = None) -> None:
    """Print the ID_VDEV assignments imported by the udev rule"""
    stream = stream or sys.stdout
    print(f"ID_VDEV={alias}", file=stream)
    print(f"ID_VDEV_PATH={VDEV_PATH_PREFIX}/{alias}", file=stream)
