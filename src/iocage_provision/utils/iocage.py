# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import shlex

from iocage_provision.data import (
    CREATE_GROUP_SCRIPT,
    CREATE_USER_SCRIPT,
    SCRIPT_PREAMBLE,
    UNBUFFERED_ENV,
)
from iocage_provision.utils.process import CommandInvocation

IOCAGE = "iocage"


def iocage_create(jail, pkglist, program=IOCAGE):
    """
    Return the invocation creating a VNET jail, replacing any stale one of the same name.
    """
    args = [
        "create",
        "--name",
        jail.name,
        "--release",
        jail.release,
        "--pkglist",
        str(pkglist),
        "--force",
    ]
    if jail.thick:
        args.append("--thickjail")
    args += [
        "vnet=on",
        f"ip4_addr=vnet0|{jail.ip}",
        f"defaultrouter={jail.gateway}",
        "resolver=none",
        "boot=on",
    ]

    return CommandInvocation(program, tuple(args), dict(UNBUFFERED_ENV))


def iocage_exec(jail_name, script, program=IOCAGE):
    """
    Return the invocation feeding a script to sh in the jail.
    """
    payload = (SCRIPT_PREAMBLE + script).encode("utf-8")
    return CommandInvocation(
        program, ("exec", jail_name, "sh"), dict(UNBUFFERED_ENV), payload
    )


def create_group_script(identity):
    return CREATE_GROUP_SCRIPT.format(
        group=shlex.quote(identity.group),
        gid=identity.gid,
    )


def create_user_script(identity):
    return CREATE_USER_SCRIPT.format(
        user=shlex.quote(identity.username),
        uid=identity.uid,
        group=shlex.quote(identity.group),
        shell=shlex.quote(identity.shell),
    )
