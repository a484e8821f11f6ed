# proposal/names.py
# Allocation of free names for new devices.
#
# Copyright (C) 2009-2014  Red Hat, Inc.
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# the GNU General Public License v.2, or (at your option) any later version.
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY expressed or implied, including the implied warranties of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General
# Public License for more details.  You should have received a copy of the
# GNU General Public License along with this program; if not, write to the
# Free Software Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA
# 02110-1301, USA.  Any Red Hat trademarks that are incorporated in the
# source code or documentation are not subject to the GNU General Public
# License and may only be used or replicated with the express permission of
# Red Hat, Inc.
#

import itertools

from ..devicegraph import Devicegraph

import logging
log = logging.getLogger("allotment")


def name_taken(name, scope):
    """ Whether a volume group or logical volume name is already in use.

        :param str name: the name to check
        :param scope: where to look for the name
        :type scope: :class:`~.devicegraph.Devicegraph` for volume group
                     names or :class:`~.devices.LVMVolumeGroupDevice` for
                     logical volume names
        :rtype: bool
    """
    if isinstance(scope, Devicegraph):
        return any(vg.vg_name == name for vg in scope.lvm_vgs)

    return any(lv.lv_name == name for lv in scope.lvm_lvs)


def available_name(original_name, scope):
    """ Return a free name based on original_name.

        If original_name is taken, a number is appended to it: "system0",
        "system1" and so on, the first one that is free.

        :param str original_name: the preferred name
        :param scope: see :func:`name_taken`
        :rtype: str
    """
    if not name_taken(original_name, scope):
        return original_name

    for suffix in itertools.count():
        name = "%s%d" % (original_name, suffix)
        if not name_taken(name, scope):
            log.debug("%s is taken, using %s", original_name, name)
            return name
