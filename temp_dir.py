import logging
import os
import tempfile
import uuid

WILDCARD = '*'
TEMP_DIR_OPTIONS = ('base_dir', 'pattern', 'default')

class ConfigurationError(ValueError):
    pass

def check_options(options, known):
    options = dict(options or {})
    for key in options:
        if key not in known:
            logging.warning(f"Ignoring unknown option: {key}")
    return options

def invoke(operation, callback, *args, **kwargs):
    """Run operation directly, or hand (err, result) to callback exactly once."""
    if callback is None:
        return operation(*args, **kwargs)

    try:
        result = operation(*args, **kwargs)
    except Exception as e:
        callback(e, None)
        return None
    callback(None, result)
    return None

def make_name(pattern):
    token = uuid.uuid4().hex
    if WILDCARD in pattern:
        return pattern.replace(WILDCARD, token, 1)
    return pattern + token

################################################################################
# function allocate - Create a new, empty, uniquely named directory
################################################################################
def allocate(base_dir=None, pattern=None, default=False):
    if default and not pattern:
        logging.error("Pattern naming requested without a pattern.")
        raise ConfigurationError("invalid `options.pattern` value: please add pattern value")

    if pattern and any(sep and sep in pattern for sep in (os.sep, os.altsep, '/')):
        logging.error(f"Pattern is not a plain directory name: {pattern}")
        raise ConfigurationError(f"invalid `options.pattern` value: {pattern!r} must not contain a path separator")

    base_dir = os.path.abspath(base_dir or tempfile.gettempdir())

    try:
        if pattern:
            path = os.path.join(base_dir, make_name(pattern))
            os.mkdir(path, 0o700)
        else:
            path = tempfile.mkdtemp(dir=base_dir)
    except OSError as e:
        logging.error(f"Failed to create directory under {base_dir}")
        logging.debug(f"Exception details: {e}")
        raise

    logging.debug(f"Created directory: {path}")
    return path

def temp_dir(options=None, callback=None):
    options = check_options(options, TEMP_DIR_OPTIONS)
    return invoke(
        allocate,
        callback,
        base_dir=options.get('base_dir'),
        pattern=options.get('pattern'),
        default=options.get('default', False),
    )
