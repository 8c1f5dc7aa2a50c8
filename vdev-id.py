#!/usr/bin/env python3
"""
vdev_id - udev helper for /dev/disk/by-vdev links

Names a SAS disk after the channel of the HBA or switch port it is cabled to
and its enclosure bay, as configured in /etc/zfs/vdev_id.conf.
"""

import sys

from vdev_id.vdev_id import VdevId


if __name__ == "__main__":
    try:
        app = VdevId()
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)
