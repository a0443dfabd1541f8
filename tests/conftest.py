from pathlib import Path

import pytest

from netconf.config import NetConf
from netconf.topology import Topology


def ht_topology(n_cores, threads=2):
    """n_cores cores, sibling of CPU i is i + n_cores (Linux numbering)."""
    return Topology([[c + t * n_cores for t in range(threads)]
                     for c in range(n_cores)])


@pytest.fixture
def make_nic(tmp_path: Path):
    def make(iface='eth0', irqs=(40, 41, 42, 43), rx_queues=4, tx_queues=4,
             msi=True):
        iface_dir = tmp_path / 'sys/class/net' / iface
        device = iface_dir / 'device'
        device.mkdir(parents=True)
        if msi:
            (device / 'msi_irqs').mkdir()
            for irq in irqs:
                (device / 'msi_irqs' / str(irq)).write_text('msi\n')
        else:
            (device / 'irq').write_text(f'{irqs[0]}\n')

        for irq in irqs:
            irq_dir = tmp_path / 'proc/irq' / str(irq)
            irq_dir.mkdir(parents=True, exist_ok=True)
            (irq_dir / 'smp_affinity').write_text('ffffffff\n')

        for i in range(rx_queues):
            queue = iface_dir / 'queues' / f'rx-{i}'
            queue.mkdir(parents=True)
            (queue / 'rps_cpus').write_text('0\n')
        for i in range(tx_queues):
            queue = iface_dir / 'queues' / f'tx-{i}'
            queue.mkdir(parents=True)
            (queue / 'xps_cpus').write_text('0\n')

        for sysctl in ('proc/sys/net/core/somaxconn',
                       'proc/sys/net/ipv4/tcp_max_syn_backlog'):
            path = tmp_path / sysctl
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text('128\n')
        return iface_dir
    return make


@pytest.fixture
def make_cpus(tmp_path: Path):
    def make(n_cores, threads=2):
        cpu_dir = tmp_path / 'sys/devices/system/cpu'
        n_cpus = n_cores * threads
        cpu_dir.mkdir(parents=True)
        (cpu_dir / 'online').write_text(f'0-{n_cpus - 1}\n')
        for cpu in range(n_cpus):
            core = cpu % n_cores
            siblings = ','.join(str(core + t * n_cores) for t in range(threads))
            topo = cpu_dir / f'cpu{cpu}' / 'topology'
            topo.mkdir(parents=True)
            (topo / 'thread_siblings_list').write_text(siblings + '\n')
        return cpu_dir
    return make


@pytest.fixture
def conf(tmp_path: Path):
    return NetConf(iface='eth0', topology=ht_topology(16), root=str(tmp_path))
