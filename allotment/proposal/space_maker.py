# proposal/space_maker.py
# Deletion of existing partitions to make room for new ones.
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

from ..errors import NoDiskSpaceError
from ..storage_log import log_method_call, log_method_return
from ..util import natural_sort_key

from .distribution import DistributionCalculator
from .space_reclaimer import SpaceReclaimer

import logging
log = logging.getLogger("allotment")


class SpaceMaker(object):

    """ Finds room in the candidate disks for a set of planned partitions,
        deleting existing partitions when the settings allow it.
    """

    def __init__(self, disk_analyzer, settings):
        """
            :param disk_analyzer: analysis of the initial devicegraph
            :type disk_analyzer: :class:`~.diskanalyzer.DiskAnalyzer`
            :param settings: the delete mode is taken from here
            :type settings: :class:`~.settings.ProposalSettings`
        """
        self.disk_analyzer = disk_analyzer
        self.settings = settings
        self.calculator = DistributionCalculator()

    def provide_space(self, original_graph, planned_partitions, keep=None):
        """ Make space for the planned partitions.

            :param original_graph: the initial devicegraph, never modified
            :type original_graph: :class:`~.devicegraph.Devicegraph`
            :param planned_partitions: the partitions that need room
            :type planned_partitions: list of :class:`~.planned.PlannedPartition`
            :keyword keep: names of partitions that must not be deleted
            :type keep: list of str
            :returns: the devicegraph with the deletions, the distribution of
                      the partitions in it and the names of the deleted
                      partitions
            :rtype: tuple
            :raises: :class:`~.errors.NoDiskSpaceError` if there is no way to
                     make the partitions fit
        """
        log_method_call(self, planned=[str(p) for p in planned_partitions],
                        delete_mode=self.settings.delete_mode, keep=keep)
        keep = list(keep or []) + [p.reuse for p in planned_partitions if p.reuse]
        new_graph = original_graph.duplicate()
        reclaimer = SpaceReclaimer(new_graph, self.disk_analyzer)
        deleted = []

        if self.settings.delete_mode == "all":
            for name in self._delete_candidates(new_graph, keep):
                deleted.extend(reclaimer.delete(name))

        distribution = self._best_distribution(new_graph, planned_partitions)
        while distribution is None and self.settings.delete_mode == "ondemand":
            candidates = self._delete_candidates(new_graph, keep)
            if not candidates:
                break

            deleted.extend(reclaimer.delete(candidates[0]))
            distribution = self._best_distribution(new_graph, planned_partitions)

        if distribution is None:
            raise NoDiskSpaceError("not enough space for the planned partitions")

        log_method_return(self, deleted)
        return (new_graph, distribution, deleted)

    def _candidate_disks(self, devicegraph):
        names = [d.name for d in self.disk_analyzer.candidate_disks]
        return [d for d in devicegraph.disks if d.name in names]

    def _delete_candidates(self, devicegraph, keep):
        """ Names of the partitions that could be deleted, in deletion order.

            Partitions placed closer to the end of their disk go first.
            Extended partitions are never deleted directly: they go away with
            their last logical partition.
        """
        disks = self._candidate_disks(devicegraph)
        partitions = [p for p in devicegraph.partitions
                      if p.disk in disks and not p.is_extended and p.name not in keep]
        partitions.sort(key=natural_sort_key)
        partitions.sort(key=lambda p: p.region.start, reverse=True)
        return [p.name for p in partitions]

    def _best_distribution(self, devicegraph, planned_partitions):
        spaces = devicegraph.free_spaces(self._candidate_disks(devicegraph))
        return self.calculator.best_distribution(planned_partitions, spaces)
