# diskanalyzer.py
# Queries about the existing contents of disks.
#
# Copyright (C) 2009-2015  Red Hat, Inc.
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

import logging
log = logging.getLogger("allotment")


class DiskAnalyzer(object):

    """ Analysis of the disks of a devicegraph.

        Results are computed the first time they are asked for and kept, so
        an analyzer describes the devicegraph as it was at that moment. Use a
        new analyzer to look at a modified devicegraph.
    """

    def __init__(self, devicegraph, candidate_disks=None):
        """
            :param devicegraph: the devicegraph to analyze
            :type devicegraph: :class:`~.devicegraph.Devicegraph`
            :keyword candidate_disks: names of the disks to consider, all
                                      of them by default
            :type candidate_disks: list of str
        """
        self.devicegraph = devicegraph
        self._candidate_disk_names = candidate_disks
        self._used_lvm_partitions = None

    @property
    def candidate_disks(self):
        disks = self.devicegraph.disks
        if self._candidate_disk_names is not None:
            disks = [d for d in disks if d.name in self._candidate_disk_names]
        return disks

    @property
    def used_lvm_partitions(self):
        """ Partitions of the candidate disks used as LVM PVs.

            Encrypted PVs count as the partition below the encryption layer.

            :returns: lists of partitions indexed by volume group name
            :rtype: dict
        """
        if self._used_lvm_partitions is None:
            self._used_lvm_partitions = self._find_used_lvm_partitions()
        return self._used_lvm_partitions

    def _find_used_lvm_partitions(self):
        disks = self.candidate_disks
        result = {}
        for vg in self.devicegraph.lvm_vgs:
            for pv in vg.pvs:
                partition = pv.raw_device if pv.type == "luks/dm-crypt" else pv
                if partition.type != "partition" or partition.disk not in disks:
                    continue
                result.setdefault(vg.vg_name, []).append(partition)

        log.debug("used lvm partitions: %s",
                  dict((vg_name, [p.name for p in parts]) for (vg_name, parts) in result.items()))
        return result

    def vg_name_of(self, partition_name):
        """ Name of the VG the named partition is a PV of, or None. """
        for (vg_name, partitions) in self.used_lvm_partitions.items():
            if partition_name in (p.name for p in partitions):
                return vg_name
        return None
