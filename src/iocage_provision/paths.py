# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import os

from configparser import ConfigParser
from pathlib import Path

from iocage_provision.utils.iocage import IOCAGE

SHORTNAME = "iocage-provision"

IOCAGE_ENV = "IOCAGE_PROVISION_IOCAGE"
DEBUG_ENV = "IOCAGE_PROVISION_DEBUG"


def get_config_path() -> Path:
    '''
    Determine the location of the user's config file
    '''
    # When running under sudo, read the invoking user's config
    username = ''
    if os.getuid() == 0 and 'SUDO_USER' in os.environ:
        username = os.environ['SUDO_USER']
    return Path(f'~{username}/.local/share/{SHORTNAME}.conf').expanduser()


def read_config(path=None) -> ConfigParser:
    cfg = ConfigParser()
    cfg.read(path or get_config_path())
    return cfg


def get_iocage_program(cfg=None) -> str:
    '''
    Determine which iocage executable to drive
    '''
    # first choice: IOCAGE_PROVISION_IOCAGE environment variable
    if IOCAGE_ENV in os.environ:
        return os.environ[IOCAGE_ENV]

    # next: iocage key in ~/.local/share/iocage-provision.conf
    if cfg is None:
        cfg = read_config()
    if 'iocage' in cfg['DEFAULT']:
        return cfg['DEFAULT']['iocage']

    return IOCAGE


def root_check_disabled(cfg=None) -> bool:
    '''
    Allow running without root, e.g. against a fake iocage script
    '''
    if os.environ.get(DEBUG_ENV):
        return True
    if cfg is None:
        cfg = read_config()
    return cfg['DEFAULT'].getboolean('ignore_root', fallback=False)
