# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import threading

import pytest

from iocage_provision.utils.process import ExecutionOutcome


class RecordingSink:
    """Collects everything a provisioning run would print."""

    def __init__(self):
        self.lines = []
        self.messages = []
        self._lock = threading.Lock()

    def output(self, line, stream):
        with self._lock:
            self.lines.append((stream, line))

    def section(self, message):
        self.messages.append(("section", message))

    def info(self, message):
        self.messages.append(("info", message))

    def debug(self, message):
        self.messages.append(("debug", message))

    def stream(self, name):
        return [line for stream, line in self.lines if stream == name]


class FakeRunner:
    """
    Stands in for the process runner: records invocations and replies with
    queued exit codes (0 once the queue is empty).
    """

    def __init__(self, *exit_codes, raises=None):
        self.exit_codes = list(exit_codes)
        self.raises = raises
        self.invocations = []
        self.pkglists = []

    def __call__(self, invocation, sink):
        self.invocations.append(invocation)
        if "--pkglist" in invocation.args:
            path = invocation.args[invocation.args.index("--pkglist") + 1]
            with open(path, encoding="utf-8") as f:
                self.pkglists.append((path, f.read()))
        if self.raises is not None and len(self.invocations) == self.raises[0]:
            raise self.raises[1]
        code = self.exit_codes.pop(0) if self.exit_codes else 0
        return ExecutionOutcome(exit_code=code)

    @property
    def subcommands(self):
        return [invocation.args[0] for invocation in self.invocations]


@pytest.fixture
def sink():
    return RecordingSink()
