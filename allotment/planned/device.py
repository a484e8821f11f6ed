# planned/device.py
# Base classes for devices that are still to be created.
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

from ..formats import get_format
from ..size import Size, UNLIMITED
from ..util import ObjectID

import logging
log = logging.getLogger("allotment")


class PlannedDevice(ObjectID):

    """ A device the allocation engine has been asked for.

        If reuse is set, no new device is created: the existing device with
        that name is used instead.
    """

    def __init__(self, reuse=None):
        self.reuse = reuse

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self._to_string())

    def __str__(self):
        return self._to_string()

    def _to_string(self):
        return "(%d)" % self.id


class PlannedBlockDevice(PlannedDevice):

    """ A planned device with a size range and a formatting directive.

        Once the real device exists, :meth:`format_device` puts the requested
        filesystem on it.
    """

    def __init__(self, mount_point=None, filesystem_type=None, label=None,
                 min_size=None, max_size=None, weight=0, reuse=None):
        """
            :keyword str mount_point: where the filesystem will be mounted
            :keyword str filesystem_type: the format to create, none by default
            :keyword str label: filesystem label
            :keyword min_size: the smallest acceptable size
            :type min_size: :class:`~.size.Size`
            :keyword max_size: the biggest useful size, unlimited by default
            :type max_size: :class:`~.size.Size`
            :keyword weight: how fast the device grows compared to others
            :type weight: int
            :keyword str reuse: name of an existing device to use instead
        """
        PlannedDevice.__init__(self, reuse=reuse)
        self.mount_point = mount_point
        self.filesystem_type = filesystem_type
        self.label = label
        self.min_size = Size(min_size or 0)
        self.max_size = Size(UNLIMITED if max_size is None else max_size)
        self.weight = weight or 0

        if self.max_size < self.min_size:
            raise ValueError("max_size (%s) is smaller than min_size (%s)" %
                             (self.max_size, self.min_size))

    def _to_string(self):
        return "%s %s-%s (%d)" % (self.mount_point or self.filesystem_type or "-",
                                  self.min_size, self.max_size, self.id)

    # short names for the size range
    @property
    def min(self):
        return self.min_size

    @property
    def max(self):
        return self.max_size

    def format_device(self, device):
        """ Apply the formatting directive to a newly created device. """
        if not self.filesystem_type:
            return

        log.debug("formatting %s as %s for %s", device.name, self.filesystem_type, self.mount_point)
        device.format = get_format(self.filesystem_type, mountpoint=self.mount_point,
                                   label=self.label)
