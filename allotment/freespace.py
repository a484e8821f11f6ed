# freespace.py
# Handles for free regions of disks.
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


class FreeDiskSpace(object):

    """ A contiguous free slice of a disk.

        This is only a handle: it keeps a reference to the disk it was
        obtained from, so code working on another copy of the devicegraph
        must look the disk up again by disk_name.
    """

    def __init__(self, disk, region):
        """
            :param disk: the disk the free space belongs to
            :type disk: :class:`~.devices.DiskDevice`
            :param region: the free blocks
            :type region: :class:`~.devices.lib.Region`
        """
        self.disk = disk
        self.region = region

    def __repr__(self):
        return "<FreeDiskSpace %s %s (%s)>" % (self.disk_name, self.region, self.disk_size)

    def __eq__(self, other):
        if not isinstance(other, FreeDiskSpace):
            return NotImplemented
        return self.disk_name == other.disk_name and self.region == other.region

    def __hash__(self):
        return hash((self.disk_name, self.region))

    @property
    def disk_name(self):
        return self.disk.name

    @property
    def disk_size(self):
        """ Size of the free slice (not of the whole disk). """
        return self.region.size

    @property
    def min_grain(self):
        return self.disk.min_grain

    @property
    def start_offset(self):
        return self.region.start_offset

    @property
    def inside_extended(self):
        """ Whether the slice lies within the disk's extended partition. """
        table = self.disk.partition_table
        if table is None or not table.has_extended:
            return False

        return table.extended_partition.region.contains(self.region)
