"""Keep irqbalance from moving the IRQs of the tuned interface.

Edits the daemon's config file in place (the first original is kept as
`<config>.orig`) and restarts it. Not safe to run concurrently.
"""
import enum
import os
import re
import shutil

import psutil

from netconf.errors import UnsupportedSystem
from netconf.nic_irq import list_irqs
from netconf.utils import AttrDict, run_command


class Backend(enum.Enum):
    INIT_D = 'init.d'
    SYSTEMD = 'systemd'


# (config file, options key, backend), checked in order
IRQBALANCE_CONFIGS = (
    ('/etc/default/irqbalance', 'OPTIONS', Backend.INIT_D),
    ('/etc/sysconfig/irqbalance', 'IRQBALANCE_ARGS', Backend.SYSTEMD),
)

RESTART_CMDS = {
    Backend.INIT_D: ['/etc/init.d/irqbalance', 'restart'],
    Backend.SYSTEMD: ['systemctl', 'try-restart', 'irqbalance'],
}


def is_running(name='irqbalance') -> bool:
    for proc in psutil.process_iter(['name', 'status']):
        if proc.info['name'] == name and \
                proc.info['status'] != psutil.STATUS_ZOMBIE:
            return True
    return False


def resolve_backend(conf):
    for config_file, options_key, backend in IRQBALANCE_CONFIGS:
        path = conf.path(config_file)
        if os.path.isfile(path):
            return AttrDict(config_file=path, options_key=options_key,
                            backend=backend)

    raise UnsupportedSystem(
        'Unknown system configuration - not restarting irqbalance!')


def ban_options(options_key, irqs) -> str:
    banned = ' '.join(f'--banirq={irq}' for irq in irqs)
    return f'{options_key}="{banned}"'


def rewrite_config(lines, options_key, irqs):
    options_re = re.compile(rf'^\s*{re.escape(options_key)}\b')
    kept = [line for line in lines if not options_re.match(line)]
    if kept and not kept[-1].endswith('\n'):
        kept[-1] += '\n'
    return kept + [ban_options(options_key, irqs) + '\n']


def backup_config(conf, config_file) -> str:
    orig_file = f'{config_file}.orig'
    if os.path.exists(orig_file):
        print(f'File {orig_file} already exists - not overwriting.')
    elif conf.dry_run:
        print(f'cp {config_file} {orig_file}')
    else:
        shutil.copyfile(config_file, orig_file)
    return orig_file


def disable_for(conf):
    if not is_running():
        print('irqbalance is not running')
        return

    try:
        balancer = resolve_backend(conf)
    except UnsupportedSystem as e:
        print(e)
        print(f'You have to prevent it from moving {conf.iface} IRQs manually!')
        return

    irqs = list_irqs(conf)
    orig_file = backup_config(conf, balancer.config_file)

    print('Restarting irqbalance: going to ban the following IRQ numbers: '
          f'{" ".join(map(str, irqs))} ...')
    print(f'Original irqbalance configuration is in {orig_file}')

    with open(balancer.config_file) as f:
        lines = f.readlines()
    lines = rewrite_config(lines, balancer.options_key, irqs)

    if conf.dry_run:
        print(f"sed -i '/^\\s*{balancer.options_key}\\b/d' "
              f'{balancer.config_file}')
        print(f"echo '{lines[-1].rstrip()}' >> {balancer.config_file}")
    else:
        tmp_file = f'{balancer.config_file}.tmp'
        with open(tmp_file, 'w') as f:
            f.writelines(lines)
        shutil.copymode(balancer.config_file, tmp_file)
        os.replace(tmp_file, balancer.config_file)

    run_command(conf, RESTART_CMDS[balancer.backend])
