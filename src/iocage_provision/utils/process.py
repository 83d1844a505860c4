# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import contextlib
import os
import shlex
import subprocess
import threading

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from iocage_provision.errors import (
    SpawnError,
    StdinWriteError,
    StreamCaptureError,
    StreamThreadError,
)
from iocage_provision.utils.console import STDERR, STDOUT


@dataclass(frozen=True)
class CommandInvocation:
    program: str
    args: Tuple[str, ...] = ()
    env: Dict[str, str] = field(default_factory=dict)
    stdin: Optional[bytes] = None

    @property
    def cmd(self):
        return [self.program, *self.args]


@dataclass(frozen=True)
class ExecutionOutcome:
    exit_code: Optional[int]
    signal: Optional[int] = None

    @property
    def success(self):
        return self.exit_code == 0

    @classmethod
    def from_returncode(cls, returncode):
        # Popen reports death by signal N as -N
        if returncode < 0:
            return cls(exit_code=None, signal=-returncode)
        return cls(exit_code=returncode)


class _Drain:
    """
    Relay one output stream of a child process to a sink, line by line.
    """

    def __init__(self, pipe, stream, sink, lossy):
        self.pipe = pipe
        self.stream = stream
        self.sink = sink
        self.errors = "replace" if lossy else "strict"
        self.error = None
        self.thread = threading.Thread(
            target=self._run, name=f"drain-{stream}", daemon=True
        )

    def start(self):
        self.thread.start()

    def join(self):
        self.thread.join()

    def _run(self):
        try:
            for raw in iter(self.pipe.readline, b""):
                # Strip one line ending, either \n or \r\n
                if raw.endswith(b"\n"):
                    raw = raw[:-1].removesuffix(b"\r")
                line = raw.decode("utf-8", errors=self.errors)
                self.sink.output(line, self.stream)
        except Exception as error:
            # The thread can't raise into the caller, so keep the error for join
            self.error = error
        finally:
            # Close our end so a child still writing gets EPIPE instead of blocking
            self.pipe.close()


def run(invocation, sink, lossy=False):
    """
    Run a command to completion while relaying its output to the sink.

    Both output streams are drained by their own thread while the calling
    thread writes the stdin payload and waits for the child. Returns an
    ExecutionOutcome once the child has exited and both streams reached
    end-of-file. Raises a CommandError subclass when the command could not be
    run or its output could not be relayed; a nonzero exit is not an error
    here and is left for the caller to judge.
    """
    cmd = invocation.cmd
    env = {**os.environ, **invocation.env}

    sink.debug(f"running; cmd={shlex.join(cmd)}")

    try:
        process = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=env,
        )
    except OSError as error:
        raise SpawnError(invocation.program) from error

    drains = []
    try:
        for pipe, stream in ((process.stdout, STDOUT), (process.stderr, STDERR)):
            if pipe is None:
                raise StreamCaptureError(stream)
            drain = _Drain(pipe, stream, sink, lossy)
            drain.start()
            drains.append(drain)

        if process.stdin is None:
            raise StreamCaptureError("stdin")

        stdin_error = None
        try:
            if invocation.stdin is not None:
                process.stdin.write(invocation.stdin)
                process.stdin.flush()
        except OSError as error:
            stdin_error = error
        finally:
            # Closing flushes leftovers, which fails the same way the write did
            with contextlib.suppress(BrokenPipeError):
                process.stdin.close()

        returncode = process.wait()
    except BaseException:
        process.kill()
        process.wait()
        raise
    finally:
        for drain in drains:
            drain.join()

    if stdin_error is not None:
        raise StdinWriteError() from stdin_error

    for drain in drains:
        if drain.error is not None:
            raise StreamThreadError(drain.stream) from drain.error

    outcome = ExecutionOutcome.from_returncode(returncode)
    sink.debug(f"finished; cmd={cmd[0]} exit_code={outcome.exit_code}")
    return outcome
