# proposal/devices_planner.py
# Planning of the devices needed by a proposal.
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

from collections import namedtuple

from ..planned import PlannedLogicalVolume, PlannedPartition, PlannedVolumeGroup
from ..storage_log import log_method_call, log_method_return

import logging
log = logging.getLogger("allotment")

# description of one of the volumes of a proposal, before deciding whether it
# becomes a partition or a logical volume
VolumeSpec = namedtuple("VolumeSpec", ["name", "mount_point", "filesystem_type",
                                       "min_size", "max_size", "weight"])

ROOT_WEIGHT = 40
HOME_WEIGHT = 60


class DevicesPlanner(object):

    """ Turns proposal settings into planned devices. """

    def __init__(self, settings):
        """
            :param settings: what the proposal should look like
            :type settings: :class:`~.settings.ProposalSettings`
        """
        self.settings = settings

    def planned_devices(self):
        """ Return the devices to create.

            Without LVM, these are one planned partition per volume. With LVM
            they are a planned volume group holding one logical volume per
            volume, preceded by the planned partition that will be its PV.

            :rtype: list of :class:`~.planned.PlannedDevice`
        """
        log_method_call(self, settings=self.settings)
        volumes = self._volumes()
        if self.settings.use_lvm:
            devices = self._lvm_devices(volumes)
        else:
            devices = [self._planned_partition(vol) for vol in volumes]

        log_method_return(self, [str(d) for d in devices])
        return devices

    def _volumes(self):
        volumes = [self._root_volume(), self._swap_volume()]
        if self.settings.use_separate_home:
            volumes.append(VolumeSpec("home", "/home", self.settings.home_filesystem_type,
                                      self.settings.home_min_size, self.settings.home_max_size,
                                      HOME_WEIGHT))
        return volumes

    def _root_volume(self):
        min_size = self.settings.root_base_size
        max_size = self.settings.root_max_size
        if self._snapshots_active:
            min_size = self._enlarged(min_size)
            max_size = self._enlarged(max_size)
            log.debug("root enlarged to %s - %s for snapshots", min_size, max_size)

        return VolumeSpec("root", "/", self.settings.root_filesystem_type,
                          min_size, max_size, ROOT_WEIGHT)

    def _swap_volume(self):
        size = self.settings.swap_size
        return VolumeSpec("swap", "swap", "swap", size, size, 0)

    @property
    def _snapshots_active(self):
        return self.settings.use_snapshots and self.settings.root_filesystem_type == "btrfs"

    def _enlarged(self, size):
        if size.unlimited:
            return size
        return size * (100 + self.settings.snapshots_size_percentage) / 100

    def _planned_partition(self, volume):
        return PlannedPartition(mount_point=volume.mount_point,
                                filesystem_type=volume.filesystem_type,
                                min_size=volume.min_size, max_size=volume.max_size,
                                weight=volume.weight,
                                encryption_password=self.settings.encryption_password)

    def _lvm_devices(self, volumes):
        lvs = [PlannedLogicalVolume(logical_volume_name=vol.name, mount_point=vol.mount_point,
                                    filesystem_type=vol.filesystem_type,
                                    min_size=vol.min_size, max_size=vol.max_size,
                                    weight=vol.weight)
               for vol in volumes]
        vg = PlannedVolumeGroup(self.settings.lvm_vg_name, lvs=lvs,
                                pvs_encryption_password=self.settings.encryption_password)

        pv = PlannedPartition(min_size=vg.pv_size(vg.min_size),
                              max_size=vg.pv_size(vg.max_size),
                              partition_id="lvm",
                              encryption_password=self.settings.encryption_password,
                              lvm_volume_group_name=vg.volume_group_name)
        return [pv, vg]
