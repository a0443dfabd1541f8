"""
Ban NIC IRQs from being moved by irqbalance.

  -sq - set all IRQs of a given NIC to CPU0 and configure RPS
  to spread NAPIs' handling between other CPUs.

  -mq - distribute NIC's IRQs among all CPUs instead of binding
  them all to CPU0 and do not enable RPS.

If neither -mq nor -sq is given a default mode is used:
   - If the number of NIC's IRQs is at least half the number of CPU cores
     (not including hyperthreads) - use an '-mq' mode.
   - Otherwise if the number of NIC's IRQs is at least 8 - use an '-mq' mode.
   - Otherwise use an '-sq' mode.

Enable XPS, increase the default values of somaxconn and tcp_max_syn_backlog.

  -h|--help - print this help information
"""
import argparse
import subprocess
import sys

from netconf import irqbalance, steering
from netconf.config import (
    BACKLOG, DEFAULT_IFACE, SOMAXCONN, TCP_MAX_SYN_BACKLOG, Mode, NetConf
)
from netconf.errors import NetConfError, UsageError
from netconf.masks import write_value
from netconf.nic_irq import get_irq_affinity, list_irqs, print_irq_affinity_map
from netconf.topology import HwlocTopology, SysfsTopology

# not counted against the [iface] [-mq|-sq] arguments
SWITCHES = ('--dry_run', '--show', '--sysfs_topology')


def build_parser():
    parser = argparse.ArgumentParser(
        prog='posix_net_conf',
        usage='%(prog)s [iface name, eth0 by default] [-mq|-sq] [-h|--help]',
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False)
    parser.add_argument('iface', nargs='?', default=DEFAULT_IFACE,
                        help='Network interface (default: eth0)')
    parser.add_argument('-mq', dest='mode', action='store_const',
                        const=Mode.MQ, help='Multi-queue mode')
    parser.add_argument('-sq', dest='mode', action='store_const',
                        const=Mode.SQ, help='Single-queue mode')
    parser.add_argument('--dry_run', action='store_true',
                        help='Print the changes instead of applying them')
    parser.add_argument('--show', action='store_true',
                        help='Print the IRQ affinity table when done')
    parser.add_argument('--sysfs_topology', action='store_true',
                        help='Read the CPU topology from sysfs, not hwloc')
    return parser


def check_usage(argv):
    tokens = [arg for arg in argv if arg not in SWITCHES]
    if len(tokens) > 2:
        raise UsageError(f"too many arguments: {' '.join(tokens)}")


def default_mode(conf):
    num_irqs = len(list_irqs(conf))
    num_cores = conf.topology.core_count()

    if num_irqs >= num_cores // 2 or num_irqs >= 8:
        return Mode.MQ
    return Mode.SQ


def tune_backlog(conf):
    # listen() backlog and the number of half-open connections remembered
    for path in (SOMAXCONN, TCP_MAX_SYN_BACKLOG):
        path = conf.path(path)
        print(f'Setting {BACKLOG} in {path}')
        write_value(conf, path, BACKLOG)


def configure(conf):
    if conf.mode is None:
        conf.mode = default_mode(conf)
    print(f'Configuring {conf.iface} in {conf.mode.value} mode')

    irqbalance.disable_for(conf)

    if conf.mode is Mode.SQ:
        steering.bind_irqs_to_cpu0(conf)
        steering.setup_rps(conf)
    else:
        steering.distribute_irqs(conf)

    steering.setup_xps(conf)
    tune_backlog(conf)


def main(argv=None, root='/'):
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    try:
        check_usage(argv)
    except UsageError:
        parser.print_help()
        sys.exit(1)
    args = parser.parse_args(argv)

    try:
        if args.sysfs_topology:
            topology = SysfsTopology(root)
        else:
            topology = HwlocTopology()

        conf = NetConf(iface=args.iface, mode=args.mode, topology=topology,
                       dry_run=args.dry_run, root=root)
        configure(conf)

        if args.show:
            print_irq_affinity_map(conf.iface, get_irq_affinity(conf))
    except (NetConfError, OSError, subprocess.CalledProcessError) as e:
        sys.exit(f'posix_net_conf: {e}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
