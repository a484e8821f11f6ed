#
# lvm.py
# lvm functions
#
# Copyright (C) 2009-2014  Red Hat, Inc.  All rights reserved.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#

import re

import logging
log = logging.getLogger("allotment")

from ..size import Size

# some of lvm's defaults
LVM_PE_START = Size("1 MiB")
LVM_PE_SIZE = Size("4 MiB")


def is_lvm_name_valid(name):
    # No . or ..
    if name == '.' or name == '..':
        return False

    # Check that all characters are in the allowed set and that the name
    # does not start with a -
    if not re.match('^[a-zA-Z0-9+_.][a-zA-Z0-9+_.-]*$', name):
        return False

    # vgname + lvname is limited to 126 characters minus the number of
    # hyphens, so no one gets a vg or lv name longer than 55.
    if len(name) > 55:
        return False

    return True


def get_pv_space(size, pe_size=LVM_PE_SIZE):
    """ Return the usable space of a PV of the given size.

        :param size: the size of the device backing the PV
        :type size: :class:`~.size.Size`
        :param pe_size: the extent size of the VG
        :type pe_size: :class:`~.size.Size`
        :rtype: :class:`~.size.Size`

        The metadata area at the start of the PV is not usable and only
        whole extents count.
    """
    if size <= LVM_PE_START:
        return Size(0)

    return (size - LVM_PE_START).floor_to(pe_size)


def get_pv_size(space, pe_size=LVM_PE_SIZE):
    """ Return the size a PV must have to provide the given usable space. """
    return space.ceil_to(pe_size) + LVM_PE_START
