# proposal/space_reclaimer.py
# Deletion of partitions, and of the partitions that depend on them.
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

from ..storage_log import log_method_call, log_method_return
from ..util import dedup_list

import logging
log = logging.getLogger("allotment")


class SpaceReclaimer(object):

    """ Deletes partitions from a devicegraph, together with the partitions
        that become useless as a consequence.

        The devicegraph given to the constructor is modified in place, so it
        is usually a duplicate owned by the caller.
    """

    def __init__(self, devicegraph, disk_analyzer):
        """
            :param devicegraph: the devicegraph to delete partitions from
            :type devicegraph: :class:`~.devicegraph.Devicegraph`
            :param disk_analyzer: tells which partitions are LVM PVs
            :type disk_analyzer: :class:`~.diskanalyzer.DiskAnalyzer`
        """
        self.devicegraph = devicegraph
        self.disk_analyzer = disk_analyzer

    def delete(self, device_name):
        """ Delete a partition and the partitions that die with it.

            If the partition is a PV, all the partitions of its volume group
            are deleted, since the group is of no use with a missing PV. If it
            is the last logical partition, the extended partition goes too.

            :param str device_name: name of the partition
            :returns: names of all the deleted partitions, an empty list if
                      there is no such partition
            :rtype: list of str
        """
        log_method_call(self, device_name=device_name)
        partition = self._find_partition(device_name)
        if partition is None:
            log.debug("no partition %s to delete", device_name)
            return []

        if self.disk_analyzer.vg_name_of(partition.name) is not None:
            deleted = self._delete_lvm_partitions(partition)
        else:
            deleted = self._delete_partition(partition)

        deleted = dedup_list(deleted)
        log_method_return(self, deleted)
        return deleted

    def _find_partition(self, name):
        return next(iter(self.devicegraph.select(self.devicegraph.partitions, name=name)), None)

    def _delete_partition(self, partition):
        """ Delete a partition from its partition table.

            If it was the only remaining logical partition, the empty extended
            partition is deleted too.
        """
        log.info("Deleting partition %s in device graph", partition.name)
        if self._last_logical(partition):
            log.info("It's the last logical one, so deleting the extended")
            return self._delete_extended(partition.partition_table)

        partition.partition_table.delete_partition(partition.name)
        return [partition.name]

    def _delete_extended(self, partition_table):
        """ Delete the extended partition and all the logical ones. """
        extended = partition_table.extended_partition
        names = [extended.name] + [p.name for p in partition_table.logical_partitions]
        partition_table.delete_partition(extended.name)
        return names

    def _last_logical(self, partition):
        if not partition.is_logical:
            return False

        return len(partition.partition_table.logical_partitions) == 1

    def _delete_lvm_partitions(self, partition):
        """ Delete all the partitions of the volume group partition is a PV of. """
        log.info("Deleting %s, which is part of an LVM volume group", partition.name)
        vg_name = self.disk_analyzer.vg_name_of(partition.name)
        names = [p.name for p in self.disk_analyzer.used_lvm_partitions[vg_name]]
        log.info("These LVM partitions will be deleted: %s", names)

        deleted = []
        for name in names:
            # an earlier deletion may have taken it already
            target = self._find_partition(name)
            if target is not None:
                deleted.extend(self._delete_partition(target))
        return deleted
