import logging
import re

from temp_dir import ConfigurationError

UNITS = {
    'b': 1,
    'kb': 1024,
    'mb': 1024 ** 2,
    'gb': 1024 ** 3,
    'tb': 1024 ** 4,
    'pb': 1024 ** 5,
}

SIZE_RE = re.compile(r'^\s*(\d+(?:\.\d+)?|\.\d+)\s*([a-z]*)\s*$')

def parse_size(value):
    """Turn sizes like '100b', '1.5 KB' or 2048 into a number of bytes."""
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid `options.max_file_size` value: {value!r}")
    if isinstance(value, int):
        return value

    match = SIZE_RE.match(str(value).lower())
    unit = (match.group(2) or 'b') if match else None
    if unit not in UNITS:
        logging.debug(f"Can't parse size: {value!r}")
        raise ConfigurationError(f"invalid `options.max_file_size` value: {value!r}")

    return int(float(match.group(1)) * UNITS[unit])
