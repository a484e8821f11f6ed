# planned/assigned_space.py
# Planned partitions assigned to one free region of a disk.
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

from ..devices.lib import PartitionType
from ..size import Size, sum_sizes

import logging
log = logging.getLogger("allotment")


def _nils_last(value):
    # None sorts after any value
    return (value is None, value if value is not None else 0)


class AssignedSpace(object):

    """ A free space of a disk together with the planned partitions that
        should be created in it.

        An AssignedSpace only lives for one allocation attempt. It answers
        feasibility questions (:meth:`valid`, :attr:`enforced_last`) and keeps
        the partitions in the order in which they should be created.
    """

    def __init__(self, disk_space, planned_partitions):
        """
            :param disk_space: the free space
            :type disk_space: :class:`~.freespace.FreeDiskSpace`
            :param planned_partitions: the partitions to create in it
            :type planned_partitions: list of :class:`~.planned.PlannedPartition`
        """
        self.disk_space = disk_space
        self.partitions = list(planned_partitions)
        self._num_logical = 0
        self._partition_type = None
        self._partition_type_calculated = False
        self.sort_partitions()

    def __repr__(self):
        return "<AssignedSpace disk_space=%r, num_logical=%d, partitions=%s>" % \
            (self.disk_space, self.num_logical, [str(p) for p in self.partitions])

    @property
    def disk(self):
        return self.disk_space.disk

    @property
    def disk_name(self):
        return self.disk_space.disk_name

    @property
    def disk_size(self):
        return self.disk_space.disk_size

    @property
    def region(self):
        return self.disk_space.region

    @property
    def min_grain(self):
        return self.disk_space.min_grain

    @property
    def num_logical(self):
        """ Number of logical partitions that must be created in the space. """
        return self._num_logical

    @num_logical.setter
    def num_logical(self, value):
        if not isinstance(value, int) or value < 0:
            raise ValueError("number of logical partitions must be a non-negative integer")

        self._num_logical = value
        # the usable size changed, so the partition that must go last may too
        self.sort_partitions()

    @property
    def partition_type(self):
        """ Restriction imposed by the disk and the existing partitions.

            :returns: :attr:`~.devices.lib.PartitionType.primary` if the space
                      can only hold primary partitions,
                      :attr:`~.devices.lib.PartitionType.logical` if it can
                      only hold logical ones, or None if there are no
                      restrictions
        """
        if not self._partition_type_calculated:
            self._partition_type = self._calculate_partition_type()
            self._partition_type_calculated = True
        return self._partition_type

    def _calculate_partition_type(self):
        table = self.disk.partition_table
        if table is None:
            # judge by the partition table that will be created
            extended_possible = self.disk.preferred_label_type == "msdos"
            has_extended = False
        else:
            extended_possible = table.extended_possible
            has_extended = table.has_extended

        if not extended_possible:
            return PartitionType.primary

        if not has_extended:
            return None

        return PartitionType.logical if self.disk_space.inside_extended else PartitionType.primary

    @property
    def overhead_of_logical(self):
        """ Space taken by the boot record of one logical partition. """
        return self.min_grain

    @property
    def usable_size(self):
        """ Space that can be distributed among the planned partitions.

            The boot records of the planned logical partitions are subtracted
            from the size of the space. If the space is already inside an
            extended partition, the first of those boot records is already
            outside of the space.
        """
        if self.num_logical == 0:
            return self.disk_size

        logical = self.num_logical
        if self.partition_type == PartitionType.logical:
            logical -= 1

        overhead = self.overhead_of_logical * logical
        if overhead >= self.disk_size:
            return Size(0)
        return self.disk_size - overhead

    def _rounded_min(self):
        return sum_sizes([p.min_size for p in self.partitions], rounding=self.min_grain)

    def valid(self):
        """ Whether the planned partitions fit in the space.

            This is a necessary condition, not a sufficient one. The
            max_start_offset of the partitions is not checked.
        """
        if self.usable_size >= self._rounded_min():
            return True

        # at first sight there is not enough space, but maybe enforcing
        # some order...
        return self.enforced_last is not None

    def unused(self):
        """ Space that will be wasted even if every partition grows to its max. """
        maximum = sum_sizes([p.max_size for p in self.partitions])
        usable = self.usable_size
        return Size(0) if maximum >= usable else usable - maximum

    def extra_size(self):
        """ Space available in addition to the minima.

            This is slightly pessimistic: if one partition is placed last and
            not rounded, the extra space is actually a bit bigger.
        """
        needed = self._rounded_min()
        return Size(0) if needed >= self.disk_size else self.disk_size - needed

    def usable_extra_size(self):
        """ Usable space available in addition to the minima. """
        needed = sum_sizes([p.min_size for p in self.partitions])
        usable = self.usable_size
        return Size(0) if needed >= usable else usable - needed

    @property
    def enforced_last(self):
        """ The partition that must be at the end of the space to make all of
            them fit, or None.

            Partitions are rounded up to min_grain, except the last one which
            can take whatever is left up to the end of the space. That only
            matters when the size of the space is not a multiple of min_grain.
            If the partitions fit in any order, or if they cannot fit at all,
            this is None.
        """
        rounded_up = self._rounded_min()
        usable = self.usable_size
        # there is enough space to fit with any order
        if usable >= rounded_up:
            return None

        missing = rounded_up - usable
        # impossible to fit
        if missing >= self.min_grain:
            return None

        for partition in self.partitions:
            ceil = partition.min_size.ceil_to(self.min_grain)
            if ceil >= missing and ceil - missing >= partition.min_size:
                return partition

        return None

    def sort_partitions(self):
        """ Sort the planned partitions in the order they should be created.

            Partitions are sorted by disk and then by max_start_offset, with
            unrestricted ones at the end. Equal partitions keep their
            relative order. The enforced last partition, if any, is moved to
            the end.
        """
        self.partitions = sorted(self.partitions,
                                 key=lambda p: (_nils_last(p.disk), _nils_last(p.max_start_offset)))
        last = self.enforced_last
        if last is None:
            return

        log.debug("%s must be the last partition in %r", last, self.disk_space)
        self.partitions.remove(last)
        self.partitions.append(last)
