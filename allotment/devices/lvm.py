# devices/lvm.py
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

from .. import errors
from ..devicelibs import lvm
from ..formats import get_format
from ..size import Size, ROUND_DOWN, ROUND_UP
from ..storage_log import log_method_call

import logging
log = logging.getLogger("allotment")

from .storage import StorageDevice


class LVMVolumeGroupDevice(StorageDevice):

    """ An LVM Volume Group.

        The size of the VG is computed from its PVs, its free space from the
        LVs in it.
    """
    _type = "lvmvg"

    def __init__(self, name, parents=None, pe_size=None, exists=False):
        """
            :param name: the device name (generally a device node's basename)
            :type name: str
            :keyword parents: a list of parent devices
            :type parents: list of :class:`StorageDevice`
            :keyword pe_size: physical extent size
            :type pe_size: :class:`~.size.Size`
            :keyword exists: does this device exist?
            :type exists: bool
        """
        if not lvm.is_lvm_name_valid(name):
            raise ValueError("%s is not a valid name for a volume group" % name)

        self.pe_size = Size(pe_size or lvm.LVM_PE_SIZE)
        StorageDevice.__init__(self, name, parents=parents, exists=exists)

    def __repr__(self):
        s = StorageDevice.__repr__(self)
        s += ("  free = %(free)s  PE Size = %(pe_size)s\n"
              "  PVs = %(pvs)s\n"
              "  LVs = %(lvs)s\n" %
              {"free": self.available_space, "pe_size": self.pe_size,
               "pvs": [pv.name for pv in self.pvs],
               "lvs": [lv.lv_name for lv in self.lvm_lvs]})
        return s

    def _add_parent(self, parent):
        super(LVMVolumeGroupDevice, self)._add_parent(parent)
        if parent.format.type != "lvmpv":
            parent.format = get_format("lvmpv", vg_name=self.name)
        else:
            parent.format.vg_name = self.name

    def _remove_parent(self, parent):
        super(LVMVolumeGroupDevice, self)._remove_parent(parent)
        parent.format.vg_name = None

    @property
    def vg_name(self):
        return self.name

    @property
    def path(self):
        return "%s/%s" % (self._dev_dir, self.name)

    @property
    def extent_size(self):
        return self.pe_size

    @property
    def pvs(self):
        """ A list of this VG's PVs """
        return self.parents[:]

    @property
    def lvm_lvs(self):
        """ A list of this VG's LVs """
        return [c for c in self.children if c.type == "lvmlv"]

    def _get_size(self):
        """ The size of this VG: the usable space of all its PVs. """
        size = Size(0)
        for pv in self.pvs:
            size += lvm.get_pv_space(pv.size, self.pe_size)
        return size

    def _set_size(self, newsize):
        raise errors.DeviceError("the size of a volume group depends on its PVs")

    @property
    def available_space(self):
        """ The amount of free space in this VG. """
        used = sum((lv.size for lv in self.lvm_lvs), Size(0))
        if used > self.size:
            # only possible after removing PVs
            return Size(0)
        return self.size - used

    @property
    def extents(self):
        """ Number of extents in this VG """
        return int(self.size // self.pe_size)

    def align(self, size, roundup=False):
        """ Align a size to a multiple of physical extent size. """
        size = Size(size)
        return size.round_to_nearest(self.pe_size, rounding=ROUND_UP if roundup else ROUND_DOWN)

    def add_lvm_pv(self, device):
        """ Use device as a new PV of this VG. """
        log_method_call(self, name=self.name, pv=device.name)
        if device in self.pvs:
            raise errors.DeviceError("%s is already a PV of %s" % (device.name, self.name))
        if device.format.type == "lvmpv" and device.format.vg_name not in (None, self.name):
            raise errors.DeviceError("%s is a PV of %s" % (device.name, device.format.vg_name))

        self.parents.append(device)

    def create_lvm_lv(self, lv_name, size):
        """ Create a new LV in this VG.

            :param str lv_name: the name of the LV inside the VG
            :param size: the LV size, rounded down to whole extents
            :type size: :class:`~.size.Size`
            :returns: the new logical volume, already in the devicegraph
            :rtype: :class:`LVMLogicalVolumeDevice`
            :raises: :class:`~.errors.DeviceError` if there is no room for it
        """
        log_method_call(self, name=self.name, lv_name=lv_name, size=size)
        size = self.align(size)
        if size > self.available_space:
            raise errors.DeviceError("not enough free space in %s for %s (%s > %s)" %
                                     (self.name, lv_name, size, self.available_space))
        if lv_name in (lv.lv_name for lv in self.lvm_lvs):
            raise errors.DeviceError("%s already has an LV named %s" % (self.name, lv_name))
        if self.devicegraph is None:
            raise errors.DeviceGraphError("volume group %s is not in a devicegraph" % self.name)

        lv = LVMLogicalVolumeDevice(lv_name, parents=[self], size=size)
        self.devicegraph._add_device(lv)  # pylint: disable=protected-access
        return lv

    def delete_lvm_lv(self, lv):
        """ Delete an LV of this VG and everything built on top of it. """
        log_method_call(self, name=self.name, lv=lv.name)
        if lv not in self.lvm_lvs:
            raise errors.DeviceError("%s is not an LV of %s" % (lv.name, self.name))

        self.devicegraph.recursive_remove(lv)


class LVMLogicalVolumeDevice(StorageDevice):

    """ An LVM Logical Volume """
    _type = "lvmlv"

    def __init__(self, name, parents=None, size=None, fmt=None, exists=False):
        """
            :param name: the LV name, without the VG prefix
            :type name: str
            :keyword parents: the VG this LV belongs to
            :type parents: list of :class:`LVMVolumeGroupDevice`
            :keyword size: the device's size
            :type size: :class:`~.size.Size`
            :keyword fmt: this device's formatting
            :type fmt: :class:`~.formats.DeviceFormat` or a subclass of it
        """
        if not lvm.is_lvm_name_valid(name):
            raise ValueError("%s is not a valid name for a logical volume" % name)

        if isinstance(parents, list):
            if len(parents) != 1:
                raise ValueError("constructor requires a single LVMVolumeGroupDevice instance")
            elif not isinstance(parents[0], LVMVolumeGroupDevice):
                raise ValueError("constructor requires a LVMVolumeGroupDevice instance")

        self.lv_name = name
        StorageDevice.__init__(self, "%s-%s" % (parents[0].name, name), fmt=fmt,
                               size=size, parents=parents, exists=exists)

    @property
    def vg(self):
        """ This Logical Volume's Volume Group. """
        return self.parents[0]

    @property
    def path(self):
        return "%s/%s/%s" % (self._dev_dir, self.vg.name, self.lv_name)
