# proposal/distribution.py
# Assignment of planned partitions to free spaces.
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

from collections import OrderedDict

from ..devices.lib import PartitionType
from ..formats.disklabel import MAX_PRIMARY_PARTITIONS
from ..planned import AssignedSpace
from ..size import Size, sum_sizes
from ..storage_log import log_method_call, log_method_return
from ..util import compare

import logging
log = logging.getLogger("allotment")


class PartitionsDistribution(object):

    """ A way of placing a set of planned partitions in the free spaces of
        the disks.

        Besides grouping the partitions by space, the distribution decides
        how many of them are created as logical partitions in each space.
    """

    def __init__(self, assignment):
        """
            :param assignment: planned partitions indexed by free space
            :type assignment: dict of :class:`~.freespace.FreeDiskSpace` to
                              lists of :class:`~.planned.PlannedPartition`
        """
        self.spaces = [AssignedSpace(space, parts) for (space, parts) in assignment.items() if parts]
        self._slots_ok = True
        for spaces in self._spaces_by_disk().values():
            if not self._assign_logical(spaces):
                self._slots_ok = False

    def __repr__(self):
        return "<PartitionsDistribution spaces=%s>" % self.spaces

    def _spaces_by_disk(self):
        by_disk = OrderedDict()
        for space in self.spaces:
            by_disk.setdefault(space.disk_name, []).append(space)
        return by_disk

    @staticmethod
    def _label_info(disk):
        """ (extended_possible, has_extended, free primary slots) of a disk. """
        table = disk.partition_table
        if table is None:
            label_type = disk.preferred_label_type
            return (label_type == "msdos", False, MAX_PRIMARY_PARTITIONS[label_type])

        return (table.extended_possible, table.has_extended, table.free_primary_slots)

    def _assign_logical(self, spaces):
        """ Set num_logical for the spaces of one disk.

            :returns: False if the partitions cannot get a slot in the
                      partition table
            :rtype: bool
        """
        (extended_possible, has_extended, free_slots) = self._label_info(spaces[0].disk)

        logical_spaces = [s for s in spaces if s.partition_type == PartitionType.logical]
        other_spaces = [s for s in spaces if s not in logical_spaces]
        for space in logical_spaces:
            if any(p.primary for p in space.partitions):
                return False
            space.num_logical = len(space.partitions)

        num_primary = sum(len(s.partitions) for s in other_spaces)
        if num_primary <= free_slots:
            return True

        if not extended_possible or has_extended:
            return False

        # a new extended partition is needed: it takes one slot and holds all
        # the partitions of one space
        best = None
        for space in other_spaces:
            if any(p.primary for p in space.partitions):
                continue
            if num_primary - len(space.partitions) + 1 > free_slots:
                continue

            space.num_logical = len(space.partitions)
            fits = space.valid()
            space.num_logical = 0
            if fits and (best is None or len(space.partitions) < len(best.partitions)):
                best = space

        if best is None:
            return False

        best.num_logical = len(best.partitions)
        return True

    def valid(self):
        """ Whether all the partitions can be created as distributed. """
        return self._slots_ok and all(space.valid() for space in self.spaces)

    def unused(self):
        """ Total space wasted if every partition grows to its max. """
        return sum_sizes([space.unused() for space in self.spaces])

    def num_logical(self):
        return sum(space.num_logical for space in self.spaces)

    def space_for(self, planned_partition):
        """ The assigned space holding a planned partition, or None. """
        return next((s for s in self.spaces if planned_partition in s.partitions), None)

    def better_than(self, other):
        """ Whether this distribution is better than other.

            Less wasted space is better, then fewer spaces used, then fewer
            logical partitions.
        """
        for (mine, theirs) in ((self.unused(), other.unused()),
                               (len(self.spaces), len(other.spaces)),
                               (self.num_logical(), other.num_logical())):
            result = compare(mine, theirs)
            if result:
                return result < 0

        return False


class DistributionCalculator(object):

    """ Finds the best way to place planned partitions in free spaces. """

    def best_distribution(self, planned_partitions, free_spaces):
        """ Return the best valid distribution, or None.

            :param planned_partitions: the partitions to place
            :type planned_partitions: list of :class:`~.planned.PlannedPartition`
            :param free_spaces: where they can go
            :type free_spaces: list of :class:`~.freespace.FreeDiskSpace`
            :rtype: :class:`PartitionsDistribution` or None
        """
        log_method_call(self, planned=[str(p) for p in planned_partitions], spaces=free_spaces)
        candidates = [self._candidate_spaces(p, free_spaces) for p in planned_partitions]
        if not all(candidates):
            log.debug("some planned partitions do not fit in any space")
            log_method_return(self, None)
            return None

        best = None
        for assignment in self._assignments(planned_partitions, candidates):
            distribution = PartitionsDistribution(assignment)
            if not distribution.valid():
                continue
            if best is None or distribution.better_than(best):
                best = distribution

        log_method_return(self, best)
        return best

    @staticmethod
    def _candidate_spaces(planned, free_spaces):
        spaces = []
        for space in free_spaces:
            if planned.disk is not None and planned.disk != space.disk_name:
                continue
            if planned.max_start_offset is not None and space.start_offset > planned.max_start_offset:
                continue
            if planned.min_size > space.disk_size:
                continue
            spaces.append(space)
        return spaces

    def _assignments(self, planned_partitions, candidates):
        """ Generate every assignment of partitions to spaces.

            Branches in which the raw minima overflow a space are pruned.
        """
        used = {}
        assignment = OrderedDict()

        def explore(index):
            if index == len(planned_partitions):
                yield OrderedDict((space, list(parts)) for (space, parts) in assignment.items())
                return

            planned = planned_partitions[index]
            for space in candidates[index]:
                total = used.get(space, Size(0)) + planned.min_size
                if total > space.disk_size:
                    continue

                used[space] = total
                assignment.setdefault(space, []).append(planned)
                for result in explore(index + 1):
                    yield result
                assignment[space].pop()
                if not assignment[space]:
                    del assignment[space]
                used[space] = total - planned.min_size

        return explore(0)
