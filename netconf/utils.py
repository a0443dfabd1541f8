import shlex
import subprocess


class AttrDict(dict):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.__dict__ = self


def read_file(path, default=None):
    try:
        with open(path) as f:
            return f.read().strip()
    except FileNotFoundError:
        if default is not None:
            return default
        raise


def run_command(conf, cmd):
    """Run a command with side effects; in dry-run mode only print it."""
    if conf.dry_run:
        print(shlex.join(cmd))
        return
    subprocess.run(cmd, check=True)


def read_command(cmd) -> str:
    return subprocess.check_output(cmd, text=True).strip()
