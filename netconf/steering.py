import glob
import os

from netconf.masks import write_mask, write_value
from netconf.nic_irq import iface_dir, list_irqs


def queue_count(conf, flag) -> int:
    return len(glob.glob(os.path.join(iface_dir(conf), 'queues', '*', flag)))


def setup_rps(conf):
    """Bind RPS queues to CPUs other than CPU0 and its hyperthread siblings."""
    topology = conf.topology
    # no other CPU to steer to
    if topology.is_single_core():
        return

    count = queue_count(conf, 'rps_cpus')
    if not count:
        print(f'{conf.iface} has no RPS queues')
        return

    restrict_to = set(topology.all_cpus()) - topology.core0_cpus()
    for i, mask in enumerate(topology.distribute(count, restrict_to)):
        write_mask(conf, conf.iface_path('queues', f'rx-{i}', 'rps_cpus'),
                   mask)


def setup_xps(conf):
    """Spread XPS queues over the full cpuset, CPU0 included."""
    count = queue_count(conf, 'xps_cpus')
    if not count:
        print(f'{conf.iface} has no XPS queues')
        return

    for i, mask in enumerate(conf.topology.distribute(count)):
        write_mask(conf, conf.iface_path('queues', f'tx-{i}', 'xps_cpus'),
                   mask)


def distribute_irqs(conf):
    irqs = list_irqs(conf)
    for irq, mask in zip(irqs, conf.topology.distribute(len(irqs))):
        write_mask(conf, conf.irq_path(irq), mask)


def bind_irqs_to_cpu0(conf):
    for irq in list_irqs(conf):
        print(f'Binding IRQ {irq} to CPU0')
        write_value(conf, conf.irq_path(irq), 1)
