# proposal/vg_builder.py
# Creation of LVM volume groups and logical volumes.
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

from ..errors import DeviceNotFoundError, NoDiskSpaceError
from ..partitioning import distribute_space
from ..size import Size, sum_sizes
from ..storage_log import log_method_call

from .names import available_name

import logging
log = logging.getLogger("allotment")

# name for logical volumes that do not ask for one
DEFAULT_LV_NAME = "lv"


class VolumeGroupBuilder(object):

    """ Creates the volume group and logical volumes described by a
        :class:`~.planned.PlannedVolumeGroup`.
    """

    def __init__(self, devicegraph):
        """
            :param devicegraph: the initial devicegraph, never modified
            :type devicegraph: :class:`~.devicegraph.Devicegraph`
        """
        self.original_devicegraph = devicegraph

    def create_volumes(self, planned_vg, pv_partitions=None):
        """ Return a copy of the original devicegraph in which the volume
            group and its logical volumes have been created.

            :param planned_vg: the volume group to create or reuse
            :type planned_vg: :class:`~.planned.PlannedVolumeGroup`
            :keyword pv_partitions: names of the partitions to add as PVs
            :type pv_partitions: list of str
            :returns: the new devicegraph
            :rtype: :class:`~.devicegraph.Devicegraph`
            :raises: :class:`~.errors.NoDiskSpaceError` if the logical volumes
                     do not fit, :class:`~.errors.DeviceNotFoundError` if the
                     volume group to reuse or a PV partition does not exist
        """
        log_method_call(self, planned_vg=planned_vg, pv_partitions=pv_partitions)
        new_graph = self.original_devicegraph.duplicate()
        if planned_vg.reuse:
            vg = self._find_vg(planned_vg, new_graph)
        else:
            vg = self._create_volume_group(planned_vg, new_graph)

        self._assign_physical_volumes(vg, pv_partitions or [], new_graph)
        self._make_space(vg, planned_vg)
        self._create_logical_volumes(vg, planned_vg.lvs_to_create)
        return new_graph

    def _find_vg(self, planned_vg, devicegraph):
        vg = next(iter(devicegraph.select(devicegraph.lvm_vgs, vg_name=planned_vg.reuse)), None)
        if vg is None:
            raise DeviceNotFoundError("volume group %s not found" % planned_vg.reuse)
        return vg

    def _create_volume_group(self, planned_vg, devicegraph):
        name = available_name(planned_vg.volume_group_name, devicegraph)
        log.info("creating volume group %s", name)
        return devicegraph.create_lvm_vg(name, pe_size=planned_vg.pe_size)

    def _assign_physical_volumes(self, vg, part_names, devicegraph):
        """ Add the named partitions to the volume group.

            Encrypted partitions are added through their encryption device.
        """
        for name in part_names:
            partition = next(iter(devicegraph.select(devicegraph.partitions, name=name)), None)
            if partition is None:
                raise DeviceNotFoundError("partition %s not found" % name)

            vg.add_lvm_pv(partition.encryption or partition)

    def _make_space(self, vg, planned_vg):
        """ Make space for the planned logical volumes.

            * needed: remove logical volumes until the planned ones fit
            * remove: remove all the logical volumes not reused
            * keep: keep all the logical volumes
        """
        policy = planned_vg.make_space_policy
        if policy == "keep":
            return

        lvs_to_keep = [lv.reuse for lv in planned_vg.lvs if lv.reuse]
        if policy == "needed":
            self._make_space_until_fit(vg, planned_vg, lvs_to_keep)
        elif policy == "remove":
            for lv in [lv for lv in vg.lvm_lvs if lv.lv_name not in lvs_to_keep]:
                log.info("removing logical volume %s", lv.name)
                vg.delete_lvm_lv(lv)

    def _make_space_until_fit(self, vg, planned_vg, lvs_to_keep):
        """ Delete logical volumes until the planned ones fit in vg. """
        target = sum_sizes([lv.min_size for lv in planned_vg.lvs_to_create],
                           rounding=vg.extent_size)
        missing = self._missing_vg_space(vg, target)
        while missing > Size(0):
            lv_to_delete = self._delete_candidate(vg, missing, lvs_to_keep)
            if lv_to_delete is None:
                raise NoDiskSpaceError("The volume group %s is not big enough" % vg.vg_name)

            log.info("removing logical volume %s to make %s available", lv_to_delete.name, missing)
            vg.delete_lvm_lv(lv_to_delete)
            missing = self._missing_vg_space(vg, target)

    def _delete_candidate(self, vg, target_space, lvs_to_keep):
        """ Best logical volume to delete next.

            That is the smallest LV that would make target_space available. If
            no LV is big enough, it is the biggest one.
        """
        lvs = [lv for lv in vg.lvm_lvs if lv.lv_name not in lvs_to_keep]
        if not lvs:
            return None

        big_lvs = [lv for lv in lvs if lv.size >= target_space]
        if big_lvs:
            return min(big_lvs, key=lambda lv: lv.size)

        return max(lvs, key=lambda lv: lv.size)

    def _missing_vg_space(self, vg, target_space):
        available = vg.available_space
        if available > target_space:
            return Size(0)
        return target_space - available

    def _create_logical_volumes(self, vg, planned_lvs):
        sizes = distribute_space(planned_lvs, vg.available_space, rounding=vg.extent_size)
        for (planned_lv, size) in zip(planned_lvs, sizes):
            self._create_logical_volume(vg, planned_lv, size)

    def _create_logical_volume(self, vg, planned_lv, size):
        name = planned_lv.logical_volume_name or DEFAULT_LV_NAME
        name = available_name(name, vg)
        lv = vg.create_lvm_lv(name, size)
        planned_lv.format_device(lv)
        return lv
