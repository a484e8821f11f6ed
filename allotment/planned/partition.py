# planned/partition.py
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

from ..size import Size

from .device import PlannedBlockDevice


class PlannedPartition(PlannedBlockDevice):

    """ A partition to be created.

        disk restricts the partition to the disk with that name.
        max_start_offset, if given, is the biggest acceptable distance from
        the beginning of the disk to the start of the partition. A partition
        with primary set cannot be created as a logical one.

        If lvm_volume_group_name is set, the partition is meant to be a PV of
        the planned volume group with that name and it is not formatted here.
    """

    def __init__(self, mount_point=None, filesystem_type=None, label=None,
                 min_size=None, max_size=None, weight=0, reuse=None,
                 max_start_offset=None, disk=None, primary=False, partition_id=None,
                 encryption_password=None, lvm_volume_group_name=None):
        PlannedBlockDevice.__init__(self, mount_point=mount_point,
                                    filesystem_type=filesystem_type, label=label,
                                    min_size=min_size, max_size=max_size,
                                    weight=weight, reuse=reuse)
        self.max_start_offset = None if max_start_offset is None else Size(max_start_offset)
        self.disk = disk
        self.primary = primary
        self.partition_id = partition_id
        self.encryption_password = encryption_password
        self.lvm_volume_group_name = lvm_volume_group_name

    @property
    def encrypt(self):
        """ Whether the partition must be encrypted. """
        return bool(self.encryption_password)

    def format_device(self, device):
        if self.lvm_volume_group_name:
            return
        PlannedBlockDevice.format_device(self, device)
