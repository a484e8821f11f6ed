# disklabel.py
# Device format classes for anaconda's storage configuration module.
#
# Copyright (C) 2009  Red Hat, Inc.
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

from ..errors import DeviceGraphError, DeviceNotFoundError, DiskLabelError, PartitioningError
from ..storage_log import log_method_call
from . import DeviceFormat, register_device_format

import logging
log = logging.getLogger("allotment")

# blocks reserved at the end of the disk for the backup GPT header
GPT_BACKUP_BLOCKS = 33

LABEL_TYPES = ("msdos", "gpt", "dasd")
MAX_PRIMARY_PARTITIONS = {"msdos": 4, "gpt": 128, "dasd": 3}


class DiskLabel(DeviceFormat):

    """ A partition table.

        The partitions themselves are devices in the devicegraph, children of
        the disk this table lives on. All positions are expressed in blocks of
        the disk's sector size.
    """
    _type = "disklabel"

    def __init__(self, label_type="gpt", device=None, **kwargs):
        """
            :keyword label_type: type of disklabel (msdos, gpt or dasd)
            :type label_type: str
            :keyword device: the disk this partition table lives on
            :type device: :class:`~.devices.DiskDevice`
        """
        log_method_call(self, label_type=label_type)
        DeviceFormat.__init__(self, **kwargs)

        if label_type not in LABEL_TYPES:
            raise DiskLabelError("unsupported disklabel type '%s'" % label_type)

        self._label_type = label_type
        self.device = device

    def __repr__(self):
        s = DeviceFormat.__repr__(self)
        s += ("  label_type = %(label_type)s  partitions = %(partitions)s\n" %
              {"label_type": self.label_type,
               "partitions": [p.name for p in self.partitions]})
        return s

    def __str__(self):
        return "%s disklabel" % self.label_type

    @property
    def label_type(self):
        """ The disklabel type (eg: 'gpt', 'msdos') """
        return self._label_type

    @property
    def max_primary(self):
        """ Maximum number of primary (and extended) partitions. """
        return MAX_PRIMARY_PARTITIONS[self.label_type]

    @property
    def extended_possible(self):
        """ Whether this kind of table can hold an extended partition. """
        return self.label_type == "msdos"

    #
    # partitions
    #
    @property
    def partitions(self):
        """ All the partitions in this table, sorted by number. """
        if self.device is None:
            return []

        parts = [c for c in self.device.children if c.type == "partition"]
        return sorted(parts, key=lambda p: p.number)

    @property
    def primary_partitions(self):
        return [p for p in self.partitions if p.is_primary]

    @property
    def extended_partition(self):
        return next((p for p in self.partitions if p.is_extended), None)

    @property
    def has_extended(self):
        return self.extended_partition is not None

    @property
    def logical_partitions(self):
        return [p for p in self.partitions if p.is_logical]

    @property
    def num_primary(self):
        """ Number of used primary slots, including the extended partition. """
        return len([p for p in self.partitions if not p.is_logical])

    @property
    def free_primary_slots(self):
        return max(self.max_primary - self.num_primary, 0)

    #
    # geometry
    #
    @property
    def grain(self):
        """ Allocation granularity in blocks. """
        return max(int(self.device.min_grain // self.device.sector_size), 1)

    @property
    def usable_region(self):
        """ The part of the disk partitions can be placed in. """
        from ..devices.lib import Region

        start = self.grain
        end = self.device.total_blocks - 1
        if self.label_type == "gpt":
            end -= GPT_BACKUP_BLOCKS

        return Region(start, max(end - start + 1, 0), self.device.sector_size)

    def _align_up(self, block):
        return -(-block // self.grain) * self.grain

    def _gaps(self, start, end, occupied):
        """ Free (start, end) block pairs between start and end.

            occupied is a list of (start, end) pairs. Every gap starts on a
            grain boundary and is at least one grain long.
        """
        gaps = []
        pos = start
        for (used_start, used_end) in sorted(occupied):
            if used_start > pos:
                gaps.append((pos, used_start - 1))
            pos = max(pos, used_end + 1)
        if pos <= end:
            gaps.append((pos, end))

        aligned = []
        for (gap_start, gap_end) in gaps:
            gap_start = self._align_up(gap_start)
            if gap_end - gap_start + 1 >= self.grain:
                aligned.append((gap_start, gap_end))
        return aligned

    def free_regions(self):
        """ Return the regions of this table where new partitions could go.

            :rtype: list of :class:`~.devices.lib.Region`

            Regions inside the extended partition leave room for the boot
            record that precedes the first logical partition created in them.
            Every existing logical partition is considered to own the grain
            in front of it.
        """
        from ..devices.lib import Region

        usable = self.usable_region
        if usable.length == 0:
            return []

        top = [(p.region.start, p.region.end) for p in self.partitions if not p.is_logical]
        pairs = self._gaps(usable.start, usable.end, top)

        extended = self.extended_partition
        if extended is not None:
            grain = self.grain
            logical = [(p.region.start - grain, p.region.end) for p in self.logical_partitions]
            for (gap_start, gap_end) in self._gaps(extended.region.start, extended.region.end, logical):
                gap_start += grain
                if gap_end - gap_start + 1 >= grain:
                    pairs.append((gap_start, gap_end))

        regions = [Region(s, e - s + 1, self.device.sector_size) for (s, e) in sorted(pairs)]
        log.debug("free regions on %s: %s", self.device.name, regions)
        return regions

    #
    # mutation
    #
    def _next_number(self, part_type):
        numbers = [p.number for p in self.partitions]
        if part_type == "logical":
            return max([n for n in numbers if n > 4] + [4]) + 1

        limit = 4 if self.label_type == "msdos" else self.max_primary
        for number in range(1, limit + 1):
            if number not in numbers:
                return number

        raise PartitioningError("no free partition number on %s" % self.device.name)

    def _check_region(self, part_type, region):
        if region.length == 0:
            raise PartitioningError("cannot create an empty partition")

        if part_type == "logical":
            extended = self.extended_partition
            if extended is None:
                raise PartitioningError("no extended partition on %s" % self.device.name)
            container = extended.region
            siblings = self.logical_partitions
        else:
            container = self.usable_region
            siblings = [p for p in self.partitions if not p.is_logical]

        if not container.contains(region):
            raise PartitioningError("%s is outside of the usable space" % (region,))

        for part in siblings:
            if part.region.overlaps(region):
                raise PartitioningError("%s overlaps partition %s" % (region, part.name))

    def create_partition(self, part_type, region, partition_id=None):
        """ Create a new partition in this table.

            :param part_type: primary, extended or logical
            :type part_type: :class:`~.devices.lib.PartitionType` or str
            :param region: where to place the partition
            :type region: :class:`~.devices.lib.Region`
            :keyword partition_id: the partition id or type flag to set
            :returns: the new partition, already in the devicegraph
            :rtype: :class:`~.devices.PartitionDevice`
            :raises: :class:`~.errors.PartitioningError` if the partition
                     cannot be placed there
        """
        from ..devices.lib import PartitionType
        from ..devices.partition import PartitionDevice

        log_method_call(self, device=self.device.name, part_type=part_type, region=region)
        part_type = PartitionType(part_type)
        devicegraph = self.device.devicegraph
        if devicegraph is None:
            raise DeviceGraphError("disk %s is not in a devicegraph" % self.device.name)

        if part_type == PartitionType.extended:
            if not self.extended_possible:
                raise PartitioningError("%s disklabels do not support extended partitions" %
                                        self.label_type)
            if self.has_extended:
                raise PartitioningError("%s already has an extended partition" % self.device.name)

        if part_type != PartitionType.logical and not self.free_primary_slots:
            raise PartitioningError("no free primary partition slot on %s" % self.device.name)

        self._check_region(part_type.value, region)

        number = self._next_number(part_type.value)
        separator = "p" if self.device.name[-1].isdigit() else ""
        name = "%s%s%d" % (self.device.name, separator, number)
        partition = PartitionDevice(name, disk=self.device, region=region,
                                    part_type=part_type, number=number,
                                    partition_id=partition_id)
        devicegraph._add_device(partition)  # pylint: disable=protected-access
        return partition

    def delete_partition(self, name):
        """ Delete the named partition and everything built on top of it.

            Deleting the extended partition deletes all the logical ones.

            :raises: :class:`~.errors.DeviceNotFoundError` if there is no
                     such partition in this table
        """
        log_method_call(self, device=self.device.name, name=name)
        partition = next((p for p in self.partitions if p.name == name), None)
        if partition is None:
            raise DeviceNotFoundError("no partition %s on %s" % (name, self.device.name))

        devicegraph = self.device.devicegraph
        if partition.is_extended:
            for logical in self.logical_partitions:
                devicegraph.recursive_remove(logical)

        devicegraph.recursive_remove(partition)


register_device_format(DiskLabel)
