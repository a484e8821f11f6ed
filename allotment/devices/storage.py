# devices/storage.py
# Base class for block device classes.
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

import os

from ..formats import get_format, DeviceFormat
from ..size import Size

import logging
log = logging.getLogger("allotment")

from .device import Device


class StorageDevice(Device):

    """ A generic storage device.

        A storage device has a size and carries a format, which may be the
        generic "no format" :class:`~.formats.DeviceFormat`.
    """
    _type = "storage"
    _dev_dir = "/dev"
    _partitionable = False
    _is_disk = False

    def __init__(self, name, fmt=None, size=None, parents=None, exists=False):
        """
            :param name: the device name (generally a device node's basename)
            :type name: str
            :keyword fmt: this device's formatting
            :type fmt: :class:`~.formats.DeviceFormat` or a subclass of it
            :keyword size: the device's size
            :type size: :class:`~.size.Size`
            :keyword parents: a list of parent devices
            :type parents: list of :class:`StorageDevice`
            :keyword exists: whether the device was found on the system, as
                             opposed to planned by this library
            :type exists: bool
        """
        # allow specification of individual parents
        if isinstance(parents, Device):
            parents = [parents]

        self.exists = exists
        self._size = Size(size or 0)
        self._format = get_format(None)

        super(StorageDevice, self).__init__(name, parents=parents)

        self.format = fmt

    def __repr__(self):
        s = super(StorageDevice, self).__repr__()
        s += ("  size = %(size)s  exists = %(exists)s\n"
              "  format = %(format)s\n" %
              {"size": self.size, "exists": self.exists, "format": self.format})
        return s

    @property
    def path(self):
        """ Device node representing this device. """
        return os.path.join(self._dev_dir, self.name)

    def _get_size(self):
        return self._size

    def _set_size(self, newsize):
        self._size = Size(newsize)

    size = property(lambda s: s._get_size(), lambda s, v: s._set_size(v),
                    doc="The device's size")

    def _get_format(self):
        return self._format

    def _set_format(self, fmt):
        if fmt is None:
            fmt = get_format(None)
        elif not isinstance(fmt, DeviceFormat):
            raise ValueError("format must be a DeviceFormat instance")

        log.debug("%s: setting format to %s", self.name, fmt)
        self._format = fmt

    format = property(lambda s: s._get_format(), lambda s, v: s._set_format(v),
                      doc="The device's formatting.")

    @property
    def partitionable(self):
        return self._partitionable

    @property
    def is_disk(self):
        return self._is_disk

    @property
    def disks(self):
        """ A list of all disks this device depends on, including itself. """
        disks = []
        for parent in self.parents:
            for disk in parent.disks:
                if disk not in disks:
                    disks.append(disk)

        if self.is_disk and self not in disks:
            disks.append(self)

        return disks
