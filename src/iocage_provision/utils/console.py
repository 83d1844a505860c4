# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import sys
import threading

from datetime import datetime, timezone

# Only set a color if we have an interactive tty
if sys.stdout.isatty():
    BOLD = "\033[1m"
    RED = "\033[91m"
    NORMAL = "\033[0m"
else:
    BOLD = RED = NORMAL = ""

STDOUT = "stdout"
STDERR = "stderr"


class Console:
    """
    Terminal output for progress messages and relayed command output.

    With verbosity 0 messages are prefixed with short markers and child output
    is indented beneath them. Any higher verbosity switches to timestamped
    lines with a level name and enables debug messages.

    The output and error methods may be called from several drain threads at
    once, so every write happens under a lock.
    """

    INDENT = " " * 8

    def __init__(self, verbosity=0):
        self.verbosity = verbosity
        self._lock = threading.Lock()

    def section(self, message):
        if self.verbosity:
            self._log("INFO", message)
        else:
            self._write(f"{BOLD}--- {message}{NORMAL}")

    def info(self, message):
        if self.verbosity:
            self._log("INFO", message)
        else:
            self._write(f"  - {message}")

    def debug(self, message):
        if self.verbosity:
            self._log("DEBUG", message, err=True)

    def error(self, message):
        if self.verbosity:
            self._log("ERROR", message, err=True)
        else:
            self._write(f"{RED}{BOLD}xxx {message}{NORMAL}", err=True)

    def output(self, line, stream):
        """
        Relay one line of child process output, keeping its stream of origin.
        """
        err = stream == STDERR
        if self.verbosity:
            self._log("WARN" if err else "INFO", line, err=err)
        else:
            self._write(self.INDENT + line, err=err)

    def _log(self, level, message, err=False):
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        timestamp = timestamp.replace("+00:00", "Z")
        self._write(f"{timestamp} {level:<5} {message}", err=err)

    def _write(self, text, err=False):
        with self._lock:
            print(text, file=sys.stderr if err else sys.stdout, flush=True)
