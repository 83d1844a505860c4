# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, IPv6Interface
from typing import Optional, Union

from iocage_provision.data import SSH_SERVICE_SCRIPT, SUDO_CONFIG_SCRIPT
from iocage_provision.errors import (
    CommandError,
    CommandFailedError,
    CreateGroupError,
    CreateUserError,
    JailCreateError,
    SshServiceError,
    SudoConfigError,
)
from iocage_provision.paths import get_iocage_program
from iocage_provision.utils.files import pkglist_file, pkglist_for
from iocage_provision.utils.identity import find_identity
from iocage_provision.utils.iocage import (
    create_group_script,
    create_user_script,
    iocage_create,
    iocage_exec,
)
from iocage_provision.utils.process import run


@dataclass(frozen=True)
class JailSpec:
    name: str
    ip: Union[IPv4Interface, IPv6Interface]
    gateway: Union[IPv4Address, IPv6Address]
    release: str
    thick: bool = False


@dataclass(frozen=True)
class ProvisioningRequest:
    jail: JailSpec
    user: Optional[str] = None
    ssh: bool = False


def provision(request, sink, runner=run, resolve=find_identity, program=None):
    """
    Create, start and set up a new FreeBSD jail via iocage.

    Steps run one at a time in a fixed order and the first failure aborts the
    rest. A failure may leave behind a partially provisioned jail which needs
    to be cleaned up out of band.
    """
    jail = request.jail
    if program is None:
        program = get_iocage_program()

    # Resolve before touching iocage so a typo in the user name costs nothing
    identity = resolve(request.user) if request.user is not None else None

    sink.section(f"Provisioning a jail named '{jail.name}'")

    sink.info(f"Creating '{jail.name}' via iocage")
    with pkglist_file(pkglist_for(identity)) as pkglist:
        _run_step(
            JailCreateError,
            jail.name,
            iocage_create(jail, pkglist, program),
            sink,
            runner,
        )

    if identity is not None:
        sink.info("Preparing sudo config")
        _exec_step(
            SudoConfigError, jail.name, SUDO_CONFIG_SCRIPT, sink, runner, program
        )

        sink.info(f"Creating group '{identity.group}'")
        _exec_step(
            CreateGroupError,
            jail.name,
            create_group_script(identity),
            sink,
            runner,
            program,
        )

        sink.info(f"Creating user '{identity.username}'")
        _exec_step(
            CreateUserError,
            jail.name,
            create_user_script(identity),
            sink,
            runner,
            program,
        )

    if request.ssh:
        sink.info("Enabling SSH service")
        _exec_step(
            SshServiceError, jail.name, SSH_SERVICE_SCRIPT, sink, runner, program
        )

    sink.section(f"Instance '{jail.name}' provisioned successfully")


def _exec_step(error_class, jail_name, script, sink, runner, program):
    invocation = iocage_exec(jail_name, script, program)
    _run_step(error_class, jail_name, invocation, sink, runner)


def _run_step(error_class, jail_name, invocation, sink, runner):
    try:
        outcome = runner(invocation, sink)
    except CommandError as error:
        raise error_class(jail_name) from error

    if not outcome.success:
        failure = CommandFailedError(outcome.exit_code, outcome.signal)
        raise error_class(jail_name) from failure
