# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only


class ProvisionError(Exception):
    """Base class for every error reported to the user of a provisioning run."""


class NotRootError(ProvisionError):
    def __init__(self):
        super().__init__("root privileges required")


class NoUserError(ProvisionError):
    def __init__(self, user):
        self.user = user
        super().__init__(f"system user not found; user={user}")


class NoGroupError(ProvisionError):
    def __init__(self, gid):
        self.gid = gid
        super().__init__(f"system group id not found; gid={gid}")


class PkglistError(ProvisionError):
    def __init__(self):
        super().__init__("could not generate json pkglist tempfile")


class GatewayError(ProvisionError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"could not determine default gateway; cause={reason}")


class StepError(ProvisionError):
    """
    A provisioning step failed.

    The underlying CommandError is available as __cause__.
    """

    step = None
    description = None

    def __init__(self, jail_name):
        self.jail_name = jail_name
        super().__init__(f"{self.description}; jail={jail_name}")


class JailCreateError(StepError):
    step = "create"
    description = "failed to create iocage jail"


class SudoConfigError(StepError):
    step = "sudo-config"
    description = "failed to prepare sudo config"


class CreateGroupError(StepError):
    step = "create-group"
    description = "failed to create user group"


class CreateUserError(StepError):
    step = "create-user"
    description = "failed to create user"


class SshServiceError(StepError):
    step = "ssh-service"
    description = "failed to enable an SSH service"


class CommandError(Exception):
    """Base class for failures running a single external command."""


class SpawnError(CommandError):
    def __init__(self, program):
        self.program = program
        super().__init__(f"command failed to spawn; program={program}")


class StdinWriteError(CommandError):
    def __init__(self):
        super().__init__("failed to write to stdin")


class StreamCaptureError(CommandError):
    def __init__(self, stream):
        self.stream = stream
        super().__init__(f"stream was not captured; stream={stream}")


class StreamThreadError(CommandError):
    def __init__(self, stream):
        self.stream = stream
        super().__init__(f"io stream thread failed; stream={stream}")


class CommandFailedError(CommandError):
    def __init__(self, exit_code, signal=None):
        self.exit_code = exit_code
        self.signal = signal
        if exit_code is None:
            super().__init__(f"command terminated by signal; signal={signal}")
        else:
            super().__init__(f"command exited with non-zero code; code={exit_code}")


def format_error_chain(error):
    """
    Return the message of an error followed by one line per chained cause.
    """
    lines = [f"error: {error}"]
    cause = error.__cause__
    while cause is not None:
        lines.append(f"  caused by: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)
