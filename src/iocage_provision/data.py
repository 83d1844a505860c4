# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

# Members of this group get passwordless sudo inside the jail
PRIVILEGED_GROUP = "wheel"

# Prepended to every script run in a jail so the shell stops at the first failure
SCRIPT_PREAMBLE = "set -eu\n\n"

SUDO_CONFIG_SCRIPT = (
    f"echo '%{PRIVILEGED_GROUP} ALL=(ALL) NOPASSWD: ALL' "
    f">/usr/local/etc/sudoers.d/{PRIVILEGED_GROUP}"
)

CREATE_GROUP_SCRIPT = "pw groupadd -n {group} -g {gid}"

CREATE_USER_SCRIPT = (
    "pw useradd -n {user} -u {uid} -g {group} "
    f"-G {PRIVILEGED_GROUP} -m -s {{shell}}"
)

# One command per line: set -e only stops at the end of an && list
SSH_SERVICE_SCRIPT = """sysrc -f /etc/rc.conf sshd_enable=YES
service sshd start
"""

# iocage is a Python program and will block-buffer its output when not
# attached to a terminal, which would hold back the progress we relay
UNBUFFERED_ENV = {"PYTHONUNBUFFERED": "true"}
