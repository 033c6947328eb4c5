#!/usr/bin/env python3
################################################################################
#
# Copyright (c) 2024 Qumulo, Inc. All rights reserved.
#
# NOTICE: All information and intellectual property contained herein is the
# confidential property of Qumulo, Inc. Reproduction or dissemination of the
# information or intellectual property contained herein is strictly forbidden,
# unless separate prior written permission has been obtained from Qumulo, Inc.
#
# Name:     create_random_tree.py
# Date:     2026-10-19
#
# Description:
# - Allocates a uniquely named root directory and fills it with a synthetic
#   tree of directories and files for use as a test fixture.
# - Every directory down to the configured depth gets the same number of
#   subdirectories and files (5 and 5 by default), so the default tree holds
#   781 directories including the root and 3905 files.
# - Randomize mode draws the per-directory counts from [0, branching] and the
#   file sizes from [0, max_file_size).
# - Settings come from keyword options, an INI config file or the command line.
#
################################################################################

import argparse
import concurrent.futures
import configparser
import inspect
import logging
import os
import random
import sys
from collections import namedtuple
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from byte_size import parse_size
from temp_dir import ConfigurationError, allocate, check_options, invoke

DEFAULT_MAX_FILE_SIZE = '1kb'
DEFAULT_BRANCHING = 5
DEFAULT_DEPTH = 5
DEFAULT_WORKERS = 8
CHUNK_SIZE = 1024 * 1024

TREE_OPTIONS = (
    'base_dir', 'pattern', 'default', 'max_file_size', 'randomize',
    'branching', 'depth', 'seed', 'workers',
)

TreeResult = namedtuple('TreeResult', ['root', 'directories', 'files'])

def check_int(name, value, minimum):
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid `options.{name}` value: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid `options.{name}` value: {value!r}")
    if number < minimum:
        raise ConfigurationError(f"invalid `options.{name}` value: must be at least {minimum}")
    return number

@dataclass(frozen=True)
class GenerationConfig:
    base_dir: str = None
    pattern: str = None
    default: bool = False
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    randomize: bool = False
    branching: int = DEFAULT_BRANCHING
    depth: int = DEFAULT_DEPTH
    seed: int = None
    workers: int = DEFAULT_WORKERS

    def __post_init__(self):
        max_file_size = parse_size(self.max_file_size)
        if max_file_size < 0:
            raise ConfigurationError("invalid `options.max_file_size` value: must not be negative")
        object.__setattr__(self, 'max_file_size', max_file_size)
        object.__setattr__(self, 'branching', check_int('branching', self.branching, 0))
        object.__setattr__(self, 'depth', check_int('depth', self.depth, 1))
        object.__setattr__(self, 'workers', check_int('workers', self.workers, 1))
        object.__setattr__(self, 'default', bool(self.default))
        object.__setattr__(self, 'randomize', bool(self.randomize))

################################################################################
# function resolve_config - Build a GenerationConfig from an options mapping
################################################################################
def resolve_config(options=None):
    options = check_options(options, TREE_OPTIONS)

    def option(name, default):
        value = options.get(name)
        return default if value is None else value

    config = GenerationConfig(
        base_dir=options.get('base_dir'),
        pattern=options.get('pattern'),
        default=option('default', False),
        max_file_size=option('max_file_size', DEFAULT_MAX_FILE_SIZE),
        randomize=option('randomize', False),
        branching=option('branching', DEFAULT_BRANCHING),
        depth=option('depth', DEFAULT_DEPTH),
        seed=options.get('seed'),
        workers=option('workers', DEFAULT_WORKERS),
    )
    logging.debug(f"{inspect.currentframe().f_code.co_name}: resolved {config}")
    return config

def branch_count(config, rng):
    if config.randomize:
        return rng.randint(0, config.branching)
    return config.branching

def file_size(config, rng):
    if config.randomize:
        return rng.randrange(config.max_file_size) if config.max_file_size > 0 else 0
    return config.max_file_size

def create_single_file(filename, size):
    remaining = size
    with open(filename, 'xb') as f:
        while remaining > 0:
            chunk = min(CHUNK_SIZE, remaining)
            f.write(os.urandom(chunk))
            remaining -= chunk
    return str(filename)

def create_random_files(current_depth, directory, config, rng, executor, files):
    num_files = branch_count(config, rng)
    logging.debug(f"Creating {num_files} files in directory: {directory}")

    futures = [
        executor.submit(create_single_file, directory / f"file_{current_depth}_{i}.bin", file_size(config, rng))
        for i in range(num_files)
    ]

    for future in futures:
        try:
            files.append(future.result())
        except OSError as e:
            logging.error(f"Failed to create a file in {directory}")
            logging.debug(f"Exception details: {e}")
            raise

def create_directories_and_files(current_depth, current_dir, config, rng, executor, directories, files):
    create_random_files(current_depth, current_dir, config, rng, executor, files)

    if current_depth < config.depth:
        num_subdirs = branch_count(config, rng)
        subdirs = []
        for i in range(num_subdirs):
            subdir = current_dir / f"dir_{current_depth}_{i}"
            try:
                subdir.mkdir()
            except OSError as e:
                logging.error(f"Failed to create directory {subdir}")
                logging.debug(f"Exception details: {e}")
                raise
            subdirs.append(subdir)
            directories.append(str(subdir))

        for subdir in subdirs:
            create_directories_and_files(current_depth + 1, subdir, config, rng, executor, directories, files)

################################################################################
# function generate - Allocate a root directory and fill it with a random tree
################################################################################
def generate(config):
    """Build the tree described by config and return a TreeResult.

    A failure part way through leaves the partial tree on disk; removing it is
    up to the caller.
    """
    rng = random.Random(config.seed)
    root = allocate(config.base_dir, config.pattern, config.default)
    directories = [root]
    files = []

    logging.info(f"Generating tree in {root} (depth {config.depth}, branching {config.branching}, randomize {config.randomize})")
    with concurrent.futures.ThreadPoolExecutor(max_workers=config.workers) as executor:
        create_directories_and_files(1, Path(root), config, rng, executor, directories, files)

    logging.info(f"Finished tree in {root}: {len(directories)} directories, {len(files)} files")
    return TreeResult(root, tuple(directories), tuple(files))

def temp_dir_with_files(options=None, callback=None):
    return invoke(lambda: generate(resolve_config(options)), callback)

################################################################################
# function load_config - Load configuration from a file
################################################################################
def load_config(config_file_path):
    config = configparser.ConfigParser(interpolation=None)
    try:
        found = config.read(config_file_path)
    except configparser.Error as e:
        logging.error(f"Failed to load configuration file: {config_file_path}")
        logging.debug(f"Exception details: {e}")
        raise ConfigurationError(f"Invalid configuration file {config_file_path}: {e}")
    if not found:
        logging.error(f"Failed to load configuration file: {config_file_path}")
        raise ConfigurationError(f"Configuration file {config_file_path} does not exist.")

    section = config['DEFAULT']
    try:
        options = {
            'base_dir': section.get('BASE_DIR'),
            'pattern': section.get('PATTERN'),
            'default': section.getboolean('REQUIRE_PATTERN'),
            'max_file_size': section.get('MAX_FILE_SIZE'),
            'randomize': section.getboolean('RANDOMIZE'),
            'branching': section.getint('BRANCHING'),
            'depth': section.getint('DEPTH'),
            'seed': section.getint('SEED'),
            'workers': section.getint('WORKERS'),
        }
    except (ValueError, configparser.Error) as e:
        logging.debug(f"Exception details: {e}")
        raise ConfigurationError(f"Invalid value in configuration file {config_file_path}: {e}")

    return {key: value for key, value in options.items() if value is not None}

################################################################################
# function setup_logging - Set up logging configuration with optional file output
################################################################################
def setup_logging(is_debug, log_file=None):
    log_level = logging.DEBUG if is_debug else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s', handlers=handlers)
    logging.debug("Logging setup complete. Logging is now active.")

################################################################################
# function parse_args - Parse command line arguments
################################################################################
def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Create a random directory tree for test fixtures.')
    parser.add_argument('--base-dir', type=str, help='Directory to create the tree root in (default: system temp dir)')
    parser.add_argument('--pattern', type=str, help='Root directory name pattern, * is replaced by a unique token')
    parser.add_argument('--max-file-size', type=str, help='Maximum file size (e.g., 100b, 4kb, 1mb)')
    parser.add_argument('--randomize', action=argparse.BooleanOptionalAction, default=None, help='Randomize branch counts and file sizes')
    parser.add_argument('--require-pattern', dest='default', action=argparse.BooleanOptionalAction, default=None, help='Fail unless a pattern is given')
    parser.add_argument('--branching', type=int, help='Subdirectories and files per directory')
    parser.add_argument('--depth', type=int, help='Depth of the deepest files')
    parser.add_argument('--seed', type=int, help='Seed for randomize mode')
    parser.add_argument('--workers', type=int, help='Threads used to write files')
    parser.add_argument('--config-file', type=str, help='Path to an INI configuration file')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--log-file', type=str, help='Also write log output to this file')
    return parser.parse_args(argv)

def display_header(options, config_file=None):
    current_time_str = datetime.now().strftime("%Y-%m-%d %H:%M")
    width = 65
    border = '#'

    attributes = {
        "base_dir": "Base Directory:",
        "pattern": "Pattern:",
        "max_file_size": "Max File Size:",
        "randomize": "Randomize:",
        "branching": "Branching:",
        "depth": "Depth:",
        "seed": "Seed:",
        "config_file": "Config File:",
    }

    values = dict(options)
    values["config_file"] = config_file

    max_label_length = max(len(label) for label in attributes.values())

    header = [
        f"{border * width}",
        f"{border}{'Random Tree Generator'.center(width - 2)}{border}",
        f"{border}{current_time_str.center(width - 2)}{border}",
        f"{border * width}"
    ]

    for attr, label in attributes.items():
        value = values.get(attr)
        if value is not None:
            header.append(f'{border} {label}{" " * (max_label_length - len(label) + 1)}{str(value).ljust(width - max_label_length - 4)}{border}')

    header.append(f"{border * width}")

    for line in header:
        print(line, flush=True)

def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.debug, log_file=args.log_file)

    try:
        options = load_config(args.config_file) if args.config_file else {}
        for key in TREE_OPTIONS:
            value = getattr(args, key, None)
            if value is not None:
                options[key] = value

        config = resolve_config(options)
        display_header(options, args.config_file)
        result = generate(config)
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        return 2
    except OSError:
        logging.error("Failed to generate the directory tree.", exc_info=True)
        return 1

    print(f"Directory tree created at: {result.root}")
    return 0

if __name__ == '__main__':
    sys.exit(main())
