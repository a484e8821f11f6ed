# proposal/partition_creator.py
# Creation of the partitions of a distribution.
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

from collections import namedtuple, OrderedDict

from ..devices.lib import PartitionType, Region
from ..errors import DeviceNotFoundError
from ..partitioning import distribute_space
from ..storage_log import log_method_call

import logging
log = logging.getLogger("allotment")

CreatorResult = namedtuple("CreatorResult", ["devicegraph", "devices_map"])


class PartitionCreator(object):

    """ Creates the planned partitions of a
        :class:`~.distribution.PartitionsDistribution`.
    """

    def __init__(self, devicegraph):
        """
            :param devicegraph: the initial devicegraph, never modified
            :type devicegraph: :class:`~.devicegraph.Devicegraph`
        """
        self.original_devicegraph = devicegraph

    def create_partitions(self, distribution):
        """ Create all the partitions of a distribution on a new devicegraph.

            :param distribution: where to place the partitions
            :type distribution: :class:`~.distribution.PartitionsDistribution`
            :returns: the new devicegraph and the planned partition of every
                      created partition, indexed by device name
            :rtype: :class:`CreatorResult`
        """
        log_method_call(self, distribution=distribution)
        new_graph = self.original_devicegraph.duplicate()
        devices_map = OrderedDict()
        for assigned in distribution.spaces:
            devices_map.update(self._process_space(assigned, new_graph))

        return CreatorResult(new_graph, devices_map)

    def _process_space(self, assigned, devicegraph):
        """ Create the partitions of one assigned space.

            Logical partitions are preceded by the grain that holds their boot
            record. If the space needs a new extended partition, it takes the
            whole space.
        """
        disk = devicegraph.get_device_by_name(assigned.disk_name)
        if disk is None:
            raise DeviceNotFoundError("disk %s not found" % assigned.disk_name)

        table = disk.partition_table
        if table is None:
            table = disk.create_partition_table()

        region = assigned.region
        grain = table.grain
        sizes = distribute_space(assigned.partitions, assigned.usable_size,
                                 rounding=assigned.min_grain, fit_last=True)

        if assigned.num_logical:
            part_type = PartitionType.logical
            start = region.start
            if assigned.partition_type != PartitionType.logical:
                log.info("creating extended partition on %s", disk.name)
                table.create_partition(PartitionType.extended, Region(region.start, region.length,
                                                                      region.block_size))
                start += grain
        else:
            part_type = PartitionType.primary
            start = region.start

        devices_map = OrderedDict()
        for (planned, size) in zip(assigned.partitions, sizes):
            length = int(size // disk.sector_size)
            partition = table.create_partition(part_type, Region(start, length, region.block_size),
                                               partition_id=planned.partition_id)
            log.info("created %s (%s) for %s", partition.name, partition.size, planned)

            device = partition
            if planned.encrypt:
                device = partition.encrypt(planned.encryption_password)
            planned.format_device(device)

            devices_map[partition.name] = planned
            start += length
            if part_type == PartitionType.logical:
                start += grain

        return devices_map
