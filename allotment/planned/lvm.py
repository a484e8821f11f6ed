# planned/lvm.py
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

from ..devicelibs import lvm
from ..formats.luks import LUKS_METADATA_SIZE
from ..size import Size, UNLIMITED, sum_sizes

from .device import PlannedDevice, PlannedBlockDevice

MAKE_SPACE_POLICIES = ("keep", "remove", "needed")


class PlannedLogicalVolume(PlannedBlockDevice):

    """ A logical volume to be created.

        reuse, if given, is the name of an existing LV of the volume group
        (without the VG prefix).
    """

    def __init__(self, logical_volume_name=None, mount_point=None, filesystem_type=None,
                 label=None, min_size=None, max_size=None, weight=0, reuse=None):
        PlannedBlockDevice.__init__(self, mount_point=mount_point,
                                    filesystem_type=filesystem_type, label=label,
                                    min_size=min_size, max_size=max_size,
                                    weight=weight, reuse=reuse)
        self.logical_volume_name = logical_volume_name

    def _to_string(self):
        return "%s %s" % (self.logical_volume_name or "-", PlannedBlockDevice._to_string(self))


class PlannedVolumeGroup(PlannedDevice):

    """ A volume group to be created or reused.

        make_space_policy tells what to do with the LVs already in a reused
        volume group:

        * keep: keep them all
        * remove: remove all of them, except the ones reused by planned LVs
        * needed: remove them one by one until the planned LVs fit
    """

    def __init__(self, volume_group_name, lvs=None, reuse=None, make_space_policy="needed",
                 pvs_encryption_password=None, pe_size=lvm.LVM_PE_SIZE):
        """
            :param str volume_group_name: name for a new volume group
            :keyword lvs: the logical volumes to create or reuse
            :type lvs: list of :class:`PlannedLogicalVolume`
            :keyword str reuse: name of an existing volume group to use
            :keyword str make_space_policy: keep, remove or needed
            :keyword str pvs_encryption_password: password for the PVs
            :keyword pe_size: extent size for a new volume group
            :type pe_size: :class:`~.size.Size`
        """
        PlannedDevice.__init__(self, reuse=reuse)
        if make_space_policy not in MAKE_SPACE_POLICIES:
            raise ValueError("invalid make space policy '%s'" % make_space_policy)

        self.volume_group_name = volume_group_name
        self.lvs = list(lvs or [])
        self.make_space_policy = make_space_policy
        self.pvs_encryption_password = pvs_encryption_password
        self.pe_size = Size(pe_size)

    def _to_string(self):
        return "%s [%s] (%d)" % (self.volume_group_name,
                                 ", ".join(str(lv) for lv in self.lvs), self.id)

    @property
    def lvs_to_create(self):
        return [lv for lv in self.lvs if not lv.reuse]

    @property
    def min_size(self):
        """ Space the new LVs need, in whole extents. """
        return sum_sizes([lv.min_size for lv in self.lvs_to_create], rounding=self.pe_size)

    @property
    def max_size(self):
        lvs = self.lvs_to_create
        if any(lv.max_size.unlimited for lv in lvs):
            return UNLIMITED
        return sum_sizes([lv.max_size for lv in lvs], rounding=self.pe_size)

    def pv_size(self, space):
        """ Size of a partition that provides space to the volume group.

            Accounts for the LVM metadata and, if the PVs are encrypted, for
            the LUKS header.
        """
        if space.unlimited:
            return space

        size = lvm.get_pv_size(space, self.pe_size)
        if self.pvs_encryption_password:
            size += LUKS_METADATA_SIZE
        return size
