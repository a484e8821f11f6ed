# devices/disk.py
# Classes to represent various types of disk-like devices.
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

from ..errors import DeviceError
from ..formats import get_format
from ..formats.disklabel import DiskLabel
from ..freespace import FreeDiskSpace
from ..size import Size, MiB
from ..storage_log import log_method_call

import logging
log = logging.getLogger("allotment")

from .storage import StorageDevice
from .lib import LINUX_SECTOR_SIZE

DEFAULT_MIN_GRAIN = MiB


class DiskDevice(StorageDevice):

    """ A local/generic disk.

        min_grain is the smallest amount of space partitions are aligned to;
        every partition start and every free region start is a multiple of
        it.
    """
    _type = "disk"
    _partitionable = True
    _is_disk = True

    def __init__(self, name, fmt=None, size=None, sector_size=LINUX_SECTOR_SIZE,
                 min_grain=DEFAULT_MIN_GRAIN, preferred_label_type="gpt", exists=True):
        """
            :param name: the device name (generally a device node's basename)
            :type name: str
            :keyword size: the device's size
            :type size: :class:`~.size.Size`
            :keyword sector_size: logical sector size
            :type sector_size: :class:`~.size.Size`
            :keyword min_grain: partition alignment
            :type min_grain: :class:`~.size.Size`
            :keyword str preferred_label_type: the type of partition table
                                               to create if the disk has none
            :keyword fmt: this device's formatting
            :type fmt: :class:`~.formats.DeviceFormat` or a subclass of it
        """
        self.sector_size = Size(sector_size)
        self.min_grain = Size(min_grain)
        self.preferred_label_type = preferred_label_type
        if self.min_grain % self.sector_size:
            raise ValueError("min_grain must be a multiple of the sector size")

        StorageDevice.__init__(self, name, fmt=fmt, size=size, exists=exists)

    def __repr__(self):
        s = StorageDevice.__repr__(self)
        s += ("  sector_size = %(sector_size)s  min_grain = %(min_grain)s\n" %
              {"sector_size": self.sector_size, "min_grain": self.min_grain})
        return s

    def _set_format(self, fmt):
        StorageDevice._set_format(self, fmt)
        if isinstance(fmt, DiskLabel):
            fmt.device = self

    @property
    def total_blocks(self):
        return int(self.size // self.sector_size)

    @property
    def partition_table(self):
        """ The partition table on this disk, or None. """
        if isinstance(self.format, DiskLabel):
            return self.format
        return None

    @property
    def partitions(self):
        table = self.partition_table
        return table.partitions if table else []

    def create_partition_table(self, label_type=None):
        """ Create a new, empty partition table on this disk.

            :keyword str label_type: the disklabel type, defaults to
                                     preferred_label_type
            :returns: the new partition table
            :rtype: :class:`~.formats.disklabel.DiskLabel`
            :raises: :class:`~.errors.DeviceError` if the disk is in use
        """
        log_method_call(self, name=self.name, label_type=label_type)
        if self.children:
            raise DeviceError("cannot create a partition table on %s, it is in use" % self.name)

        self.format = get_format("disklabel", label_type=label_type or self.preferred_label_type,
                                 device=self)
        return self.format

    @property
    def free_spaces(self):
        """ The free slices of this disk.

            A disk without any formatting is entirely free: its free space is
            computed as if a partition table of the preferred type were
            already on it.

            :rtype: list of :class:`~.freespace.FreeDiskSpace`
        """
        table = self.partition_table
        if table is None:
            if self.format.type is not None or self.children:
                return []
            table = DiskLabel(label_type=self.preferred_label_type, device=self)

        return [FreeDiskSpace(self, region) for region in table.free_regions()]
