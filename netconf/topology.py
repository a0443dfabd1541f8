import os
import shutil

import numpy as np

from netconf.config import SYS_CPU_DIR
from netconf.errors import InvalidInput, ToolUnavailable
from netconf.masks import format_mask, parse_cpu_list, parse_mask
from netconf.utils import read_command, read_file


class Topology:
    """CPU layout as a list of cores, each a list of its hyperthread siblings.

    Core 0 is the core holding the lowest CPU id.
    """

    def __init__(self, cores):
        self.cores = sorted((sorted(core) for core in cores), key=min)

    def all_cpus(self):
        return sorted(cpu for core in self.cores for cpu in core)

    def core0_cpus(self):
        return set(self.cores[0])

    def cpu_count(self) -> int:
        return len(self.all_cpus())

    def core_count(self) -> int:
        return len(self.cores)

    def is_single_core(self) -> bool:
        return self.core0_cpus() == set(self.all_cpus())

    def distribute(self, n, restrict_to=None):
        """Split the (restricted) CPU set into `n` masks of similar weight.

        Siblings are kept adjacent so small groups stay within a core. With
        more masks than CPUs every mask gets a single CPU, reused round-robin.
        """
        if n < 1:
            raise InvalidInput(f'cannot distribute CPUs over {n} queues')

        cpus = [cpu for core in self.cores for cpu in core
                if restrict_to is None or cpu in restrict_to]
        if not cpus:
            raise InvalidInput('no CPUs left to distribute')

        if n > len(cpus):
            groups = [[cpus[i % len(cpus)]] for i in range(n)]
        else:
            groups = np.array_split(np.array(cpus), n)
        return [format_mask(group, prefix='0x') for group in groups]


class HwlocTopology(Topology):
    """Topology answered by the hwloc-calc and hwloc-distrib tools."""

    TOOLS = ('hwloc-calc', 'hwloc-distrib')

    def __init__(self):
        for tool in self.TOOLS:
            if shutil.which(tool) is None:
                raise ToolUnavailable(
                    f'{tool} not found, please install hwloc')

    def _calc(self, *args):
        return read_command(['hwloc-calc', *args])

    def all_cpus(self):
        return parse_mask(self._calc('all'))

    def core0_cpus(self):
        return set(parse_mask(self._calc('core:0')))

    def cpu_count(self) -> int:
        return int(self._calc('--number-of', 'pu', 'machine:0'))

    def core_count(self) -> int:
        return int(self._calc('--number-of', 'core', 'machine:0'))

    def is_single_core(self) -> bool:
        return self._calc('core:0.pu:all') == self._calc('all')

    def distribute(self, n, restrict_to=None):
        if n < 1:
            raise InvalidInput(f'cannot distribute CPUs over {n} queues')

        cmd = ['hwloc-distrib']
        if restrict_to is not None:
            cmd += ['--restrict', format_mask(restrict_to, prefix='0x')]
        cmd.append(str(n))
        return read_command(cmd).split()


class SysfsTopology(Topology):
    """Topology read from /sys/devices/system/cpu, no external tool needed."""

    def __init__(self, root='/'):
        cpu_dir = os.path.join(root, SYS_CPU_DIR.lstrip('/'))
        online = parse_cpu_list(read_file(os.path.join(cpu_dir, 'online')))

        cores = set()
        for cpu in online:
            siblings = read_file(
                f'{cpu_dir}/cpu{cpu}/topology/thread_siblings_list', str(cpu))
            cores.add(tuple(c for c in parse_cpu_list(siblings) if c in online))
        super().__init__(cores)
