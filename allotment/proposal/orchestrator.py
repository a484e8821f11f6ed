# proposal/orchestrator.py
# Allocation attempts and the retries with relaxed settings.
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

from ..diskanalyzer import DiskAnalyzer
from ..errors import DeviceNotFoundError, StorageError
from ..planned import PlannedPartition, PlannedVolumeGroup
from ..settings import ProposalSettings
from ..storage_log import log_exception_info, log_method_call

from .devices_planner import DevicesPlanner
from .partition_creator import PartitionCreator
from .space_maker import SpaceMaker
from .vg_builder import VolumeGroupBuilder

import logging
log = logging.getLogger("allotment")


class AllocationOutcome(object):

    """ The result of an allocation.

        A successful outcome carries the new devicegraph, a failed one the
        error that stopped the last attempt. Both know the settings used.
    """

    def __init__(self, settings, devicegraph=None, error=None, deleted_partitions=None):
        if (devicegraph is None) == (error is None):
            raise ValueError("an allocation outcome needs either a devicegraph or an error")

        self.settings = settings
        self.devicegraph = devicegraph
        self.error = error
        self.deleted_partitions = list(deleted_partitions or [])

    def __repr__(self):
        if self.success:
            return "<AllocationOutcome success deleted=%s>" % self.deleted_partitions
        return "<AllocationOutcome failure error=%r>" % self.error

    @property
    def success(self):
        return self.devicegraph is not None


class DistributionOrchestrator(object):

    """ Drives the allocation engine.

        Each attempt plans the devices for a set of settings, makes space for
        them, creates the partitions and then the LVM volumes. When an attempt
        fails, :meth:`propose` tries again with less demanding settings: first
        without a separate home and then also without snapshots.

        The devicegraph given to the constructor is never modified.
    """

    def __init__(self, devicegraph, settings=None):
        """
            :param devicegraph: the initial devicegraph
            :type devicegraph: :class:`~.devicegraph.Devicegraph`
            :keyword settings: initial settings, the defaults if not given
            :type settings: :class:`~.settings.ProposalSettings`
        """
        self.devicegraph = devicegraph
        self.settings = settings or ProposalSettings()

    def propose(self):
        """ Try the settings in order until one of them works.

            :returns: the first successful outcome or the last failed one
            :rtype: :class:`AllocationOutcome`
        """
        log_method_call(self, settings=self.settings)
        outcome = None
        for settings in self._settings_sequence():
            outcome = self.attempt(settings)
            if outcome.success:
                break

        return outcome

    def _settings_sequence(self):
        settings = self.settings
        yield settings

        if settings.use_separate_home:
            settings = settings.copy()
            settings.use_separate_home = False
            log.info("trying again without a separate home")
            yield settings

        if settings.use_snapshots:
            settings = settings.copy()
            settings.use_snapshots = False
            log.info("trying again without snapshots")
            yield settings

    def attempt(self, settings=None):
        """ Make exactly one allocation attempt.

            :keyword settings: the settings to use, the initial ones by default
            :type settings: :class:`~.settings.ProposalSettings`
            :rtype: :class:`AllocationOutcome`
        """
        settings = settings or self.settings
        log_method_call(self, settings=settings)
        try:
            (devicegraph, deleted) = self._allocate(settings)
        except StorageError as e:
            log_exception_info(log.info, "allocation failed: %s", [e])
            return AllocationOutcome(settings, error=e)

        log.info("allocation succeeded, deleted partitions: %s", deleted)
        return AllocationOutcome(settings, devicegraph=devicegraph, deleted_partitions=deleted)

    def _allocate(self, settings):
        planned = DevicesPlanner(settings).planned_devices()
        planned_partitions = [d for d in planned if isinstance(d, PlannedPartition)]
        planned_vgs = [d for d in planned if isinstance(d, PlannedVolumeGroup)]
        new_partitions = [p for p in planned_partitions if not p.reuse]

        disk_analyzer = DiskAnalyzer(self.devicegraph, candidate_disks=settings.candidate_disks)
        space_maker = SpaceMaker(disk_analyzer, settings)
        keep = [p.reuse for p in planned_partitions if p.reuse]
        (devicegraph, distribution, deleted) = space_maker.provide_space(self.devicegraph,
                                                                         new_partitions, keep=keep)

        result = PartitionCreator(devicegraph).create_partitions(distribution)
        devicegraph = result.devicegraph
        self._reuse_partitions(devicegraph, planned_partitions)

        for planned_vg in planned_vgs:
            pv_names = [name for (name, planned_part) in result.devices_map.items()
                        if planned_part.lvm_volume_group_name == planned_vg.volume_group_name]
            devicegraph = VolumeGroupBuilder(devicegraph).create_volumes(planned_vg, pv_names)

        return (devicegraph, deleted)

    def _reuse_partitions(self, devicegraph, planned_partitions):
        for planned in planned_partitions:
            if not planned.reuse:
                continue

            device = devicegraph.get_device_by_name(planned.reuse)
            if device is None:
                raise DeviceNotFoundError("device %s to reuse not found" % planned.reuse)

            log.info("reusing %s for %s", device.name, planned)
            planned.format_device(device)
