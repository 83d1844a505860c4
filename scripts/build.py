# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

# hat tip: <https://github.com/dairiki/hatch-zipped-directory/blob/master/hatch_zipped_directory/builder.py>

import os
import re
import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from zipapp import create_archive

SRC_PATH = Path('./src')
PACKAGE_PATH = SRC_PATH.joinpath('iocage_provision')
DIST_PATH = Path('./dist')


def read_version() -> str:
    text = PACKAGE_PATH.joinpath('__init__.py').read_text()
    return re.search(r'^__version__ = "(.+)"$', text, re.MULTILINE).group(1)


VERSION = read_version()

# 10 lines will conveniently match the default of head(1)
PREAMBLE = f'''#!/usr/bin/env python3

iocage-provision {VERSION}

Creates an iocage based FreeBSD jail with VNET networking, an optional user copied from the host and an optional SSH service.

SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
SPDX-License-Identifier: LGPL-3.0-only

-=-=-=- this is a zip file -=-=-=- what follows is binary -=-=-=-
'''


def build_tool() -> Path:

    # generate zipapp source archive from a clean copy of the package
    with tempfile.TemporaryDirectory() as staging:
        shutil.copytree(PACKAGE_PATH, Path(staging, PACKAGE_PATH.name),
                ignore=shutil.ignore_patterns('__pycache__', '*.pyc'))
        # run the package like python -m does, so the exit code is kept
        Path(staging, '__main__.py').write_text(
            'import runpy\nrunpy.run_module("iocage_provision", run_name="__main__", alter_sys=True)\n')
        pyzbuffer = BytesIO()
        create_archive(staging, target=pyzbuffer,
                interpreter='=PLACEHOLDER=',
                compressed=True)
    zipdata = pyzbuffer.getvalue().removeprefix(b"#!=PLACEHOLDER=\n")

    # output with preamble
    tool_path = DIST_PATH.joinpath('iocage-provision')
    with open(tool_path, 'wb') as f:
        f.write(PREAMBLE.encode())
        f.write(zipdata)
    os.chmod(tool_path, 0o755)
    return tool_path


if __name__ == '__main__':
    DIST_PATH.mkdir(exist_ok=True)
    print(build_tool())
