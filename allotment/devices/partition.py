# devices/partition.py
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

from ..errors import DeviceError, DeviceGraphError
from ..formats import get_format
from ..storage_log import log_method_call

import logging
log = logging.getLogger("allotment")

from .storage import StorageDevice
from .lib import PartitionType


class PartitionDevice(StorageDevice):

    """ A disk partition.

        The only type we are concerned with is primary/logical/extended,
        kept in part_type. The type attribute, as for every device, is the
        device type ("partition").
    """
    _type = "partition"

    def __init__(self, name, disk=None, region=None, part_type=PartitionType.primary,
                 number=None, fmt=None, partition_id=None, exists=False):
        """
            :param name: the device name (generally a device node's basename)
            :type name: str
            :keyword disk: the disk this partition lives on
            :type disk: :class:`~.devices.DiskDevice`
            :keyword region: the blocks of the disk this partition takes
            :type region: :class:`~.devices.lib.Region`
            :keyword part_type: primary, extended or logical
            :type part_type: :class:`~.devices.lib.PartitionType`
            :keyword int number: the partition number
            :keyword partition_id: partition id or type flag
            :keyword fmt: this device's formatting
            :type fmt: :class:`~.formats.DeviceFormat` or a subclass of it
            :keyword exists: does this device exist?
            :type exists: bool
        """
        if disk is None or region is None:
            raise ValueError("partitions need a disk and a region")

        self.region = region
        self.part_type = PartitionType(part_type)
        self.number = number
        self.partition_id = partition_id

        StorageDevice.__init__(self, name, fmt=fmt, parents=[disk], exists=exists)

    def __repr__(self):
        s = StorageDevice.__repr__(self)
        s += ("  part_type = %(part_type)s  number = %(number)s  region = %(region)r\n" %
              {"part_type": self.part_type.value, "number": self.number,
               "region": self.region})
        return s

    def _get_size(self):
        return self.region.size

    def _set_size(self, newsize):
        raise DeviceError("partitions are sized by their region")

    @property
    def disk(self):
        """ The disk this partition lives on. """
        return self.parents[0] if self.parents else None

    @property
    def partition_table(self):
        return self.disk.partition_table if self.disk else None

    @property
    def is_extended(self):
        return self.part_type == PartitionType.extended

    @property
    def is_logical(self):
        return self.part_type == PartitionType.logical

    @property
    def is_primary(self):
        return self.part_type == PartitionType.primary

    @property
    def encryption(self):
        """ The encryption device on top of this partition, if any. """
        return next((c for c in self.children if c.type == "luks/dm-crypt"), None)

    @property
    def encrypted(self):
        return self.encryption is not None

    def encrypt(self, passphrase=None):
        """ Put a LUKS layer on top of this partition.

            :keyword str passphrase: the passphrase for the new LUKS device
            :returns: the new encryption device
            :rtype: :class:`~.devices.LUKSDevice`
        """
        from .luks import LUKSDevice

        log_method_call(self, name=self.name, passphrase=passphrase)
        if self.is_extended:
            raise DeviceError("cannot encrypt extended partition %s" % self.name)
        if self.children:
            raise DeviceError("partition %s is already in use" % self.name)
        if self.devicegraph is None:
            raise DeviceGraphError("partition %s is not in a devicegraph" % self.name)

        self.format = get_format("luks", passphrase=passphrase)
        luks = LUKSDevice("luks-%s" % self.name, parents=[self])
        self.devicegraph._add_device(luks)  # pylint: disable=protected-access
        return luks
