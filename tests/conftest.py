"""Shared fixtures: fake backends and a sysfs tree builder"""

from typing import Dict, List, Optional, Sequence

import pytest

from vdev_id.backends import DevicePathLookup, DeviceMapperLookup, MultipathLookup

DIRECT_DEVICE_PATH = (
    "/devices/pci0000:80/0000:80:03.0/0000:85:00.0/host0/port-0:1/"
    "end_device-0:1/target0:0:1/0:0:1:0/block/sdb"
)

SWITCH_DEVICE_PATH = (
    "/devices/pci0000:00/0000:00:01.0/0000:03:00.0/host2/port-2:0/expander-2:0/"
    "port-2:0:12/expander-2:1/port-2:1:3/end_device-2:1:3/target2:0:7/2:0:7:0/block/sdh"
)

SAMPLE_CONFIG = """\
# vdev_id.conf for a two-port HBA
multipath     no
topology      sas_direct
phys_per_port 4

#       PCI_ID  HBA PORT  CHANNEL NAME
channel 85:00.0 1         A
channel 85:00.0 0         B

slot 3 9
"""


class FakeUdev(DevicePathLookup):
    def __init__(self, paths: Optional[Dict[str, str]] = None, links: Optional[Dict[str, List[str]]] = None):
        super().__init__()
        self.paths = paths or {}
        self.links = links or {}

    def device_path(self, name: str) -> Optional[str]:
        return self.paths.get(name)

    def device_links(self, name: str) -> List[str]:
        return self.links.get(name, [])


class FakeDeviceMapper(DeviceMapperLookup):
    def __init__(self, names: Optional[Dict[str, str]] = None):
        super().__init__()
        self.names = names or {}

    def dm_name(self, device: str) -> Optional[str]:
        return self.names.get(device)


class FakeMultipath(MultipathLookup):
    def __init__(self, paths: Optional[Dict[str, List[str]]] = None):
        super().__init__()
        self.paths = paths or {}
        self.queries = []

    def running_paths(self, name: str) -> List[str]:
        self.queries.append(name)
        return self.paths.get(name, [])


def make_sas_device(root, device_path: str, phys: Sequence[str], port_depth: int = 1,
                    attributes: Optional[Dict[str, str]] = None) -> None:
    """Create the sysfs directories of a SAS disk below root

    Args:
        root: Directory standing in for /sys
        device_path: Kernel device path of the disk
        phys: Names of the phy entries of the port directory
        port_depth: Levels below hostN of the port directory
        attributes: Attribute files of the end device's sas_device node
    """
    segments = [segment for segment in device_path.split('/') if segment]
    root.joinpath(*segments).mkdir(parents=True)

    host = next(i for i, segment in enumerate(segments) if segment.startswith("host"))
    port_dir = root.joinpath(*segments[:host + 1 + port_depth])
    for phy in phys:
        (port_dir / phy).mkdir()

    end = next(i for i, segment in enumerate(segments) if segment.startswith("end_device"))
    sas_device = root.joinpath(*segments[:end + 1], "sas_device", segments[end])
    sas_device.mkdir(parents=True)
    for name, value in (attributes or {}).items():
        (sas_device / name).write_text(value + "\n")


@pytest.fixture
def sysfs_root(tmp_path):
    root = tmp_path / "sys"
    root.mkdir()
    return root


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "vdev_id.conf"
    path.write_text(SAMPLE_CONFIG)
    return path
