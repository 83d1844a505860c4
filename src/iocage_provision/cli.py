# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import argparse
import ipaddress

from textwrap import dedent

from iocage_provision import __doc__ as DESCRIPTION
from iocage_provision import __version__
from iocage_provision.actions.provision import (
    JailSpec,
    ProvisioningRequest,
    provision,
)
from iocage_provision.errors import GatewayError, ProvisionError, format_error_chain
from iocage_provision.paths import get_iocage_program, read_config, root_check_disabled
from iocage_provision.utils.console import Console
from iocage_provision.utils.host import default_gateway, default_release
from iocage_provision.utils.identity import ensure_root

EPILOG = dedent(
    """
    examples:
      Create a jail called myjail with an address on the host's network:
        %(prog)s myjail 10.200.0.50/24

      Use a specific gateway and release, copy the host user jdoe and enable SSH:
        %(prog)s -g 10.200.0.1 -R 13.1-RELEASE -u jdoe --ssh myjail 10.200.0.50/24

    Use -v for timestamped output including every command that is run.
    """
)


def ip_with_mask(value):
    """
    Parse an address with a subnet mask such as 10.200.0.50/24.
    """
    if "/" not in value:
        raise argparse.ArgumentTypeError(
            f"{value!r} is missing a subnet mask (example: 10.200.0.50/24)"
        )
    try:
        return ipaddress.ip_interface(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(str(error)) from None


def ip_address(value):
    try:
        return ipaddress.ip_address(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(str(error)) from None


def build_parser():
    parser = argparse.ArgumentParser(
        description=DESCRIPTION,
        allow_abbrev=False,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("name", metavar="NAME", help="name for the jail instance")
    parser.add_argument(
        "ip",
        metavar="IP",
        type=ip_with_mask,
        help="IP address and subnet mask for the jail instance",
    )
    parser.add_argument(
        "-g",
        "--gateway",
        metavar="GATEWAY",
        type=ip_address,
        help="IP address of the default gateway route for the VNET "
        "(default: the host's default route according to netstat)",
    )
    parser.add_argument(
        "-R",
        "--release",
        metavar="RELEASE",
        help="FreeBSD release to use for the jail instance "
        "(default: the release running on the host)",
    )
    parser.add_argument(
        "-t",
        "--thickjail",
        action="store_true",
        help="create a thick jail with its own copy of the base system",
    )
    parser.add_argument(
        "-s",
        "--ssh",
        action="store_true",
        help="enable and start an SSH service in the jail",
    )
    parser.add_argument(
        "-u",
        "--user",
        metavar="USER",
        help="user to create in the jail, copied from the host's passwd database",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase verbosity (may be repeated)",
    )

    return parser


def parse_args(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Only query the host for defaults which weren't given
    if args.gateway is None:
        try:
            args.gateway = default_gateway()
        except GatewayError as error:
            parser.error(str(error))
    if args.release is None:
        args.release = default_release()

    return args


def main(argv=None):
    args = parse_args(argv)
    console = Console(args.verbose)
    console.debug(f"parsed cli arguments; args={vars(args)}")

    request = ProvisioningRequest(
        jail=JailSpec(
            name=args.name,
            ip=args.ip,
            gateway=args.gateway,
            release=args.release,
            thick=args.thickjail,
        ),
        user=args.user,
        ssh=args.ssh,
    )

    cfg = read_config()
    try:
        if not root_check_disabled(cfg):
            ensure_root()
        provision(request, console, program=get_iocage_program(cfg))
    except ProvisionError as error:
        console.error(format_error_chain(error))
        return 1

    return 0
