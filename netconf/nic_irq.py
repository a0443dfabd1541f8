import os

from netconf.config import SYS_NET_DIR
from netconf.errors import InterfaceNotFound
from netconf.utils import AttrDict, read_file


def iface_dir(conf) -> str:
    path = conf.iface_path()
    if not os.path.isdir(path):
        raise InterfaceNotFound(
            f'Interface {conf.iface} not found in {SYS_NET_DIR}')
    return path


def list_irqs(conf):
    """IRQ numbers of the interface: its MSI IRQs, or the single INTx one."""
    device_dir = os.path.join(iface_dir(conf), 'device')

    msi_dir = os.path.join(device_dir, 'msi_irqs')
    if os.path.isdir(msi_dir):
        irqs = os.listdir(msi_dir)
        if irqs:
            return sorted(int(irq) for irq in irqs)

    return [int(read_file(os.path.join(device_dir, 'irq')))]


def get_irq_affinity(conf):
    irq_map = {}

    for irq in list_irqs(conf):
        irq_map[irq] = AttrDict(
            mask=read_file(conf.irq_path(irq), 'unknown'),
            affinity=read_file(
                conf.irq_path(irq, 'smp_affinity_list'), 'unknown'),
            effective_affinity=read_file(
                conf.irq_path(irq, 'effective_affinity_list'), 'unknown'),
        )
    return irq_map


def print_irq_affinity_map(iface, mapping):
    header = (f"{'IRQ':<6} | {'Mask':<17} | {'Affinity (CPUs)':<15} | "
              f"{'Effective (CPUs)':<16}")
    print(f'IRQs of {iface}:')
    print(header)
    print('-' * len(header))

    for irq, info in mapping.items():
        print(f'{irq:<6} | {info.mask:<17} | {info.affinity:<15} | '
              f'{info.effective_affinity:<16}')
