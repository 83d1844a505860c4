# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import grp
import os
import pwd

from dataclasses import dataclass

from iocage_provision.errors import NoGroupError, NoUserError, NotRootError


@dataclass(frozen=True)
class Identity:
    username: str
    uid: int
    group: str
    gid: int
    shell: str


def ensure_root():
    if os.geteuid() != 0:
        raise NotRootError()


def find_identity(username):
    """
    Look up a host user and its primary group to recreate them in a jail.
    """
    try:
        user = pwd.getpwnam(username)
    except KeyError:
        raise NoUserError(username) from None

    try:
        group = grp.getgrgid(user.pw_gid)
    except KeyError:
        raise NoGroupError(user.pw_gid) from None

    return Identity(
        username=user.pw_name,
        uid=user.pw_uid,
        group=group.gr_name,
        gid=group.gr_gid,
        shell=user.pw_shell,
    )
