import errno
import os
import re

double_commas_pattern = re.compile(',,')


def parse_mask(mask):
    """Return the sorted CPU ids of a (possibly comma separated) hex mask."""
    if mask is None:
        return None

    mask = mask.strip()
    chunks = mask.split(',')

    cpus = []
    bit_index = 0
    for chunk in reversed(chunks):
        chunk = chunk.strip()
        if not chunk:
            bit_index += 32
            continue

        bits = int(chunk, 16)
        for bit in range(32):
            if bits & (1 << bit):
                cpus.append(bit_index + bit)

        bit_index += 32

    return sorted(cpus)


def format_mask(cpus, prefix='') -> str:
    bits = 0
    for cpu in cpus:
        bits |= 1 << int(cpu)

    n_words = (bits.bit_length() - 1) // 32 + 1 if bits else 1
    words = (f'{prefix}{(bits >> (32 * i)) & 0xffffffff:08x}'
             for i in reversed(range(n_words)))
    return ','.join(words)


def parse_cpu_list(cpu_list):
    """'0-3,8,10-11' -> [0, 1, 2, 3, 8, 10, 11]"""
    cpus = []
    for part in cpu_list.strip().split(','):
        if not part:
            continue
        if '-' in part:
            lo, hi = part.split('-')
            cpus.extend(range(int(lo), int(hi) + 1))
        else:
            cpus.append(int(part))
    return sorted(cpus)


def normalize_mask(mask) -> str:
    mask = re.sub('0x', '', mask.strip())

    # hwloc prints all-zero words as empty ones
    while double_commas_pattern.search(mask):
        mask = double_commas_pattern.sub(',0,', mask)
    return mask


def write_value(conf, path, value):
    if not os.path.exists(path):
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)

    if conf.dry_run:
        print(f'echo {value} > {path}')
        return

    with open(path, 'w') as f:
        f.write(f'{value}\n')


def write_mask(conf, path, mask):
    mask = normalize_mask(mask)
    print(f'Setting mask {mask} in {path}')
    write_value(conf, path, mask)
