# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import os

from ipaddress import ip_address, ip_interface
from textwrap import dedent

import pytest

from iocage_provision import cli, paths
from iocage_provision.errors import GatewayError

FAKE_IOCAGE = dedent(
    """\
    #!/bin/sh
    echo "args: $*" >> "$FAKE_IOCAGE_LOG"
    if [ "$1" = exec ]; then
        cat >> "$FAKE_IOCAGE_LOG"
    fi
    echo "iocage $1 done"
    exit "${FAKE_IOCAGE_EXIT:-0}"
    """
)


@pytest.fixture
def fake_iocage(tmp_path, monkeypatch):
    script = tmp_path / "iocage"
    script.write_text(FAKE_IOCAGE)
    os.chmod(script, 0o755)
    log = tmp_path / "iocage.log"

    monkeypatch.setenv(paths.IOCAGE_ENV, str(script))
    monkeypatch.setenv(paths.DEBUG_ENV, "1")
    monkeypatch.setenv("FAKE_IOCAGE_LOG", str(log))
    return log


def test_parse_args_with_explicit_values():
    args = cli.parse_args(
        ["-g", "192.168.0.1", "-R", "13.1-RELEASE", "-t", "-s", "-vv", "ferris", "192.168.0.100/24"]
    )

    assert args.name == "ferris"
    assert args.ip == ip_interface("192.168.0.100/24")
    assert args.gateway == ip_address("192.168.0.1")
    assert args.release == "13.1-RELEASE"
    assert args.thickjail is True
    assert args.ssh is True
    assert args.user is None
    assert args.verbose == 2


def test_parse_args_computes_defaults(monkeypatch):
    monkeypatch.setattr(cli, "default_gateway", lambda: ip_address("10.0.0.1"))
    monkeypatch.setattr(cli, "default_release", lambda: "13.2-RELEASE")

    args = cli.parse_args(["ferris", "10.0.0.50/24"])

    assert args.gateway == ip_address("10.0.0.1")
    assert args.release == "13.2-RELEASE"


def test_gateway_detection_failure_is_a_usage_error(monkeypatch, capsys):
    def no_gateway():
        raise GatewayError("default line not found")

    monkeypatch.setattr(cli, "default_gateway", no_gateway)

    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(["-R", "13.1-RELEASE", "ferris", "10.0.0.50/24"])

    assert excinfo.value.code == 2
    assert "default line not found" in capsys.readouterr().err


@pytest.mark.parametrize("ip", ["10.0.0.50", "10.0.0.500/24", "not-an-ip/24"])
def test_ip_requires_valid_address_and_mask(ip):
    with pytest.raises(SystemExit):
        cli.parse_args(["-g", "10.0.0.1", "-R", "13.1-RELEASE", "ferris", ip])


def test_main_provisions_with_fake_iocage(fake_iocage, capsys):
    returncode = cli.main(
        ["-g", "192.168.0.1", "-R", "13.1-RELEASE", "--ssh", "ferris", "192.168.0.100/24"]
    )

    assert returncode == 0
    log = fake_iocage.read_text().splitlines()
    assert log[0].startswith("args: create --name ferris --release 13.1-RELEASE --pkglist ")
    assert log[0].endswith(
        " --force vnet=on ip4_addr=vnet0|192.168.0.100/24 "
        "defaultrouter=192.168.0.1 resolver=none boot=on"
    )
    assert log[1:] == [
        "args: exec ferris sh",
        "set -eu",
        "",
        "sysrc -f /etc/rc.conf sshd_enable=YES",
        "service sshd start",
    ]

    out = capsys.readouterr().out
    assert "iocage create done" in out
    assert "Instance 'ferris' provisioned successfully" in out


def test_main_reports_failed_step(fake_iocage, monkeypatch, capsys):
    monkeypatch.setenv("FAKE_IOCAGE_EXIT", "1")

    returncode = cli.main(
        ["-g", "192.168.0.1", "-R", "13.1-RELEASE", "--ssh", "ferris", "192.168.0.100/24"]
    )

    assert returncode == 1
    assert len(fake_iocage.read_text().splitlines()) == 1
    err = capsys.readouterr().err
    assert "error: failed to create iocage jail; jail=ferris" in err
    assert "caused by: command exited with non-zero code; code=1" in err


def test_main_unknown_user(fake_iocage, capsys):
    returncode = cli.main(
        [
            "-g",
            "192.168.0.1",
            "-R",
            "13.1-RELEASE",
            "-u",
            "no-such-user-for-iocage-provision",
            "ferris",
            "192.168.0.100/24",
        ]
    )

    assert returncode == 1
    assert not fake_iocage.exists()
    assert "system user not found" in capsys.readouterr().err
