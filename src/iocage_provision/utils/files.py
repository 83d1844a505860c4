# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import contextlib
import json
import os
import tempfile

from iocage_provision.errors import PkglistError


def pkglist_for(identity):
    """
    Return the packages to install when creating a jail for the given identity.
    """
    if identity is None:
        return []
    if os.path.basename(identity.shell) == "bash":
        return ["sudo", "bash"]
    return ["sudo"]


@contextlib.contextmanager
def pkglist_file(pkgs):
    """
    Write an iocage package list to a temporary file and yield its path.

    The file is removed when the context exits, whether or not the body
    raised.
    """
    try:
        pkglist = tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", prefix="pkglist", suffix=".json"
        )
    except OSError as error:
        raise PkglistError() from error

    with pkglist:
        try:
            json.dump({"pkgs": pkgs}, pkglist, separators=(",", ":"))
            pkglist.flush()
        except OSError as error:
            raise PkglistError() from error

        yield pkglist.name
