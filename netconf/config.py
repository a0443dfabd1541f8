import enum
import os


SYS_NET_DIR = '/sys/class/net'
SYS_CPU_DIR = '/sys/devices/system/cpu'
PROC_IRQ_DIR = '/proc/irq'

SOMAXCONN = '/proc/sys/net/core/somaxconn'
TCP_MAX_SYN_BACKLOG = '/proc/sys/net/ipv4/tcp_max_syn_backlog'
BACKLOG = 4096

DEFAULT_IFACE = 'eth0'


class Mode(enum.Enum):
    MQ = 'mq'
    SQ = 'sq'


class NetConf:
    """Settings of a single run, passed explicitly to every step.

    `root` prefixes every /sys, /proc and /etc path so a fake tree can stand
    in for the live system.
    """

    def __init__(self, iface=DEFAULT_IFACE, mode=None, topology=None,
                 dry_run=False, root='/'):
        self.iface = iface
        self.mode = mode
        self.topology = topology
        self.dry_run = dry_run
        self.root = root

    def path(self, *parts) -> str:
        path = os.path.join(*map(str, parts))
        return os.path.join(self.root, path.lstrip('/'))

    def iface_path(self, *parts) -> str:
        return self.path(SYS_NET_DIR, self.iface, *parts)

    def irq_path(self, irq, name='smp_affinity') -> str:
        return self.path(PROC_IRQ_DIR, irq, name)
