# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import ipaddress
import os
import subprocess

from iocage_provision.errors import GatewayError


def default_gateway():
    """
    Return the address of the host's default IPv4 route as reported by netstat.
    """
    try:
        result = subprocess.run(
            ["netstat", "-r", "-n", "-f", "inet"],
            capture_output=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as error:
        raise GatewayError("failed to successfully run netstat command") from error

    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError as error:
        raise GatewayError("netstat output is not valid utf-8") from error

    return parse_netstat_gateway(output)


def parse_netstat_gateway(output):
    """
    Extract the gateway column of the default route from netstat -r output.
    """
    for line in output.splitlines():
        if line.startswith("default"):
            break
    else:
        raise GatewayError("default line not found")

    fields = line.split()
    if len(fields) < 2:
        raise GatewayError("second column not found on default line")

    try:
        return ipaddress.ip_address(fields[1])
    except ValueError as error:
        raise GatewayError("failed to parse ip address") from error


def default_release(uname_release=None):
    """
    Return the release tag matching the host, e.g. 13.1-RELEASE for a 13.1-STABLE host.
    """
    if uname_release is None:
        uname_release = os.uname().release

    parts = uname_release.split("-")[:2]
    return "-".join("RELEASE" if part == "STABLE" else part for part in parts)
