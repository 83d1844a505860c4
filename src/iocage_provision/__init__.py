# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

"""Create an iocage based FreeBSD jail \
with VNET networking, an optional user copied from the host \
and an optional SSH service."""

__version__ = "0.2.1.dev1"
__author__ = "Jip-Hop"
__copyright__ = "Copyright © 2024, Jip-Hop and the Jailmakers"
__license__ = "LGPL-3.0-only"
