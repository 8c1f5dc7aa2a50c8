"""multipath-tools backend"""

import re
from typing import List

from .base import MultipathLookup

# "|- 1:0:0:0 sdb 8:16 active ready running"
PATH_LINE = re.compile(r'(\d+:\d+:\d+:\d+)\s+(\S+)\s+\d+:\d+\s')


class MultipathBackend(MultipathLookup):
    """Lists the paths of a multipath map with `multipath -ll`"""

    def __init__(self, logger=None, cmd: str = "multipath"):
        super().__init__(logger)
        self.cmd = cmd

    def running_paths(self, name: str) -> List[str]:
        """Get the devices of all running paths of multipath map name"""
        output = self._execute_command([self.cmd, "-ll", name])
        return parse_running_paths(output)


def parse_running_paths(output: str) -> List[str]:
    """Extract the device names of running paths from `multipath -ll` output

    Example output:
        mpatha (35000c500a1b2c3d4) dm-0 SEAGATE,ST4000NM0023
        size=3.6T features='0' hwhandler='0' wp=rw
        `-+- policy='service-time 0' prio=1 status=active
          |- 0:0:3:0 sdd 8:48 active ready running
          `- 1:0:3:0 sdm 8:192 failed faulty offline
    """
    paths = []

    for line in output.splitlines():
        if "running" not in line:
            continue
        match = PATH_LINE.search(line)
        if match:
            paths.append(match.group(2))

    return paths
