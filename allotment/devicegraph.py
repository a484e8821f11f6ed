# devicegraph.py
# Device management for the allocation engine.
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

import copy
import pprint

from .devices import DiskDevice, LVMVolumeGroupDevice
from .errors import DeviceGraphError
from .storage_log import log_method_call, log_method_return
from .util import natural_sort_key

import logging
log = logging.getLogger("allotment")


class Devicegraph(object):

    """ A graph of the storage devices of a system.

        This is an in-memory model. Nothing done to it touches real devices,
        so the usual way to try a change is to work on a :meth:`duplicate`
        and throw it away if the change does not work out.
    """

    def __init__(self):
        self._devices = []

    def __str__(self):
        done = []

        def show_subtree(root, depth):
            abbreviate_subtree = root in done
            s = "%s%s\n" % ("  " * depth, root)
            done.append(root)
            if abbreviate_subtree:
                s += "%s...\n" % ("  " * (depth + 1),)
            else:
                for child in root.children:
                    s += show_subtree(child, depth + 1)
            return s

        roots = [d for d in self._devices if not d.parents]
        tree = ""
        for root in roots:
            tree += show_subtree(root, 0)
        return tree

    def duplicate(self):
        """ Return a deep copy of this devicegraph.

            Device ids are preserved, so a device and its copy compare equal
            by id but not by identity.
        """
        log.debug("starting Devicegraph copy")
        new = copy.deepcopy(self)
        log.debug("finished Devicegraph copy")
        return new

    #
    # Device list
    #
    @property
    def devices(self):
        """ List of devices currently in the graph """
        return self._devices[:]

    @property
    def names(self):
        return [d.name for d in self._devices]

    @property
    def disks(self):
        """ A list of the disks in the graph, sorted by name. """
        return sorted((d for d in self._devices if d.is_disk), key=lambda d: d.name)

    @property
    def partitions(self):
        parts = [d for d in self._devices if d.type == "partition"]
        return sorted(parts, key=natural_sort_key)

    @property
    def lvm_vgs(self):
        return [d for d in self._devices if d.type == "lvmvg"]

    @property
    def lvm_lvs(self):
        return [d for d in self._devices if d.type == "lvmlv"]

    @property
    def leaves(self):
        """ List of all devices upon which no other devices exist. """
        return [d for d in self._devices if d.isleaf]

    def select(self, devices=None, **attrs):
        """ Return the devices whose attributes have the given values.

            :keyword devices: the devices to filter, all of them by default
            :type devices: list of :class:`~.devices.Device`
            :returns: the matching devices, in their original order
            :rtype: list of :class:`~.devices.Device`

            Example::

                devicegraph.select(devicegraph.lvm_lvs, lv_name="root")
        """
        if devices is None:
            devices = self._devices

        return [d for d in devices
                if all(getattr(d, attr, None) == value for (attr, value) in attrs.items())]

    def get_device_by_name(self, name):
        """ Return a device with a matching name, or None. """
        log_method_call(self, name=name)
        result = next((d for d in self._devices if d.name == name), None)
        log_method_return(self, result)
        return result

    def get_device_by_id(self, id_num):
        """ Return the device with the given id, or None. """
        return next((d for d in self._devices if d.id == id_num), None)

    def _add_device(self, newdev):
        """ Add a device to the graph.

            :param newdev: the device to add
            :type newdev: a subclass of :class:`~.devices.StorageDevice`

            Raise DeviceGraphError if the device is already in the graph or
            if one of its parents is not.
        """
        if newdev in self._devices or newdev.name in self.names:
            raise DeviceGraphError("Trying to add already existing device %s." % newdev.name)

        # make sure this device's parent devices are in the graph already
        for parent in newdev.parents:
            if parent not in self._devices:
                raise DeviceGraphError("parent device not in graph")

        newdev.devicegraph = self
        self._devices.append(newdev)
        log.info("added %s %s (id %d) to device graph", newdev.type, newdev.name, newdev.id)

    def _remove_device(self, dev):
        """ Remove a leaf device from the graph. """
        if dev not in self._devices:
            raise ValueError("Device '%s' not in graph" % dev.name)

        if not dev.isleaf:
            log.debug("%s has children %s", dev.name, pprint.pformat([c.name for c in dev.children]))
            raise ValueError("Cannot remove non-leaf device '%s'" % dev.name)

        for parent in list(dev.parents):
            dev.parents.remove(parent)

        self._devices.remove(dev)
        dev.devicegraph = None
        log.info("removed %s %s (id %d) from device graph", dev.type, dev.name, dev.id)

    def recursive_remove(self, device):
        """ Remove a device after removing its dependent devices.

            :param :class:`~.devices.StorageDevice` device: the device to remove

            If the device is not a leaf, all of its dependents are removed
            recursively until it is a leaf device. Removing a PV takes the
            whole volume group with it. Disks lose their formatting but stay
            in the graph.
        """
        log.debug("removing %s", device.name)
        devices = device.descendants

        while devices:
            log.debug("devices to remove: %s", [d.name for d in devices])
            leaves = [d for d in devices if d.isleaf]
            for leaf in leaves:
                self._remove_device(leaf)
                devices.remove(leaf)

        if device.is_disk:
            device.format = None
        else:
            self._remove_device(device)

    #
    # Creation
    #
    def add_disk(self, name, size, label_type=None, **kwargs):
        """ Add a disk to the graph.

            :param str name: the disk name (eg: "sda")
            :param size: the disk size
            :type size: :class:`~.size.Size`
            :keyword str label_type: type of partition table to create on it,
                                     none by default
            :returns: the new disk
            :rtype: :class:`~.devices.DiskDevice`

            Other keyword arguments are passed to :class:`~.devices.DiskDevice`.
        """
        disk = DiskDevice(name, size=size, **kwargs)
        self._add_device(disk)
        if label_type:
            disk.create_partition_table(label_type)
        return disk

    def create_lvm_vg(self, vg_name, pe_size=None):
        """ Create a new volume group, with no PVs yet.

            :param str vg_name: the name of the new VG
            :keyword pe_size: physical extent size
            :type pe_size: :class:`~.size.Size`
            :rtype: :class:`~.devices.LVMVolumeGroupDevice`
        """
        vg = LVMVolumeGroupDevice(vg_name, pe_size=pe_size)
        self._add_device(vg)
        return vg

    def free_spaces(self, disks=None):
        """ Return the free slices of the given disks (all disks by default).

            :rtype: list of :class:`~.freespace.FreeDiskSpace`
        """
        if disks is None:
            disks = self.disks

        spaces = []
        for disk in disks:
            spaces.extend(disk.free_spaces)
        return spaces

