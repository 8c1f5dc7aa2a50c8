import os

import pytest

from conftest import FakeDeviceMapper, FakeMultipath
from vdev_id.backends.devmapper import DeviceMapperBackend
from vdev_id.backends.multipath import parse_running_paths
from vdev_id.models import DeviceDescriptor, ResolvedDevice
from vdev_id.resolver import DeviceResolver, partition_suffix, strip_partition

MULTIPATH_LL = """\
mpatha (35000c500a1b2c3d4) dm-0 SEAGATE,ST4000NM0023
size=3.6T features='0' hwhandler='0' wp=rw
`-+- policy='service-time 0' prio=1 status=active
  |- 0:0:3:0 sdd 8:48  failed faulty offline
  |- 1:0:3:0 sdm 8:192 active ready running
  `- 2:0:3:0 sdv 65:80 active ready running
"""


@pytest.mark.parametrize("dm_name,dev_type,expected", [
    ("mpathap3", "disk", "-part3"),
    ("mpathap3", None, "-part3"),
    ("mpathap3", "partition", ""),
    ("mpatha", "disk", ""),
    ("35000c500a1b2c3d4p12", "disk", "-part12"),
])
def test_partition_suffix(dm_name, dev_type, expected):
    assert partition_suffix(dm_name, dev_type) == expected


def test_strip_partition():
    assert strip_partition("mpathap3") == "mpatha"
    assert strip_partition("mpatha") == "mpatha"
    assert strip_partition("p1") == ""


def test_parse_running_paths():
    assert parse_running_paths(MULTIPATH_LL) == ["sdm", "sdv"]
    assert parse_running_paths("") == []


class TestDeviceResolver:
    def make_resolver(self, names=None, paths=None):
        self.multipath = FakeMultipath(paths)
        return DeviceResolver(FakeDeviceMapper(names), self.multipath)

    def test_not_multipath_is_passthrough(self):
        resolver = self.make_resolver()

        resolved = resolver.resolve(DeviceDescriptor(raw_name="sdb", dm_name="mpathap3"))

        assert resolved == ResolvedDevice(real_name="sdb")
        assert self.multipath.queries == []

    def test_dm_name_hint(self):
        resolver = self.make_resolver(paths={"mpatha": ["sdm", "sdv"]})

        resolved = resolver.resolve(DeviceDescriptor(raw_name="dm-3", is_multipath=True,
                                                     dm_name="mpathap3", dev_type="disk"))

        assert resolved == ResolvedDevice(real_name="sdm", partition_suffix="-part3")
        assert self.multipath.queries == ["mpatha"]

    def test_partition_devtype_has_no_suffix(self):
        resolver = self.make_resolver(paths={"mpatha": ["sdm"]})

        resolved = resolver.resolve(DeviceDescriptor(raw_name="dm-3", is_multipath=True,
                                                     dm_name="mpathap3", dev_type="partition"))

        assert resolved == ResolvedDevice(real_name="sdm", partition_suffix="")

    def test_reverse_lookup_of_dm_name(self):
        resolver = self.make_resolver(names={"dm-0": "mpatha"}, paths={"mpatha": ["sdv"]})

        resolved = resolver.resolve(DeviceDescriptor(raw_name="dm-0", is_multipath=True))

        assert resolved == ResolvedDevice(real_name="sdv")

    def test_unknown_dm_name(self):
        resolver = self.make_resolver()

        assert resolver.resolve(DeviceDescriptor(raw_name="dm-7", is_multipath=True)) is None

    def test_empty_base_name(self):
        resolver = self.make_resolver()

        assert resolver.resolve(DeviceDescriptor(raw_name="dm-7", is_multipath=True, dm_name="p1")) is None
        assert self.multipath.queries == []

    def test_no_running_path(self):
        resolver = self.make_resolver(paths={"mpatha": []})

        assert resolver.resolve(DeviceDescriptor(raw_name="dm-0", is_multipath=True, dm_name="mpatha")) is None


def test_device_mapper_backend(tmp_path):
    mapper_dir = tmp_path / "mapper"
    mapper_dir.mkdir()
    (tmp_path / "dm-0").touch()
    (tmp_path / "dm-1").touch()
    (mapper_dir / "control").touch()
    os.symlink("../dm-0", str(mapper_dir / "mpatha"))
    os.symlink("../dm-1", str(mapper_dir / "mpathap1"))

    backend = DeviceMapperBackend(mapper_dir=str(mapper_dir))

    assert backend.dm_name("dm-0") == "mpatha"
    assert backend.dm_name("dm-1") == "mpathap1"
    assert backend.dm_name("dm-2") is None


def test_device_mapper_backend_without_directory(tmp_path):
    backend = DeviceMapperBackend(mapper_dir=str(tmp_path / "missing"))

    assert backend.dm_name("dm-0") is None
