# __init__.py
# Entry point for device format classes.
#
# Copyright (C) 2009  Red Hat, Inc.
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

from ..util import ObjectID

import logging
log = logging.getLogger("allotment")

device_formats = {}


def register_device_format(fmt_class):
    if not issubclass(fmt_class, DeviceFormat):
        raise ValueError("arg1 must be a subclass of DeviceFormat")

    device_formats[fmt_class._type] = fmt_class
    log.debug("registered device format class %s as %s",
              fmt_class.__name__, fmt_class._type)


def get_format(fmt_type, *args, **kwargs):
    """ Return an instance of the appropriate DeviceFormat class.

        :param fmt_type: The name of the formatting type
        :type fmt_type: str.
        :return: the format instance
        :rtype: :class:`DeviceFormat`

        .. note::

            Any additional arguments will be passed on to the constructor for
            the format class. Types without a class of their own (most
            filesystems) are represented by a plain :class:`DeviceFormat`
            that remembers the requested type.
    """
    fmt_class = device_formats.get(fmt_type, DeviceFormat)
    fmt = fmt_class(*args, **kwargs)

    # this allows us to store the given type for formats we implement as
    # DeviceFormat.
    if fmt_type and fmt.type is None:
        fmt._type = fmt_type  # pylint: disable=protected-access

    log.debug("get_format('%s') returning %s instance with object id %d",
              fmt_type, fmt.__class__.__name__, fmt.id)
    return fmt


class DeviceFormat(ObjectID):

    """ Generic device format.

        This represents the absence of recognized formatting. That could mean a
        device is uninitialized, has had zeros written to it, or contains some
        valid formatting that is not known to this module.
    """
    _type = None

    def __init__(self, mountpoint=None, label=None, uuid=None):
        """
            :keyword str mountpoint: where the filesystem will be mounted
            :keyword str label: filesystem label
            :keyword str uuid: this format's UUID
        """
        self.mountpoint = mountpoint
        self.label = label
        self.uuid = uuid

    def __repr__(self):
        return ("%(classname)s instance (%(id)s) object id %(object_id)d--\n"
                "  type = %(type)s  mountpoint = %(mountpoint)s  label = %(label)s\n" %
                {"classname": self.__class__.__name__, "id": "%#x" % id(self),
                 "object_id": self.id, "type": self.type,
                 "mountpoint": self.mountpoint, "label": self.label})

    def __str__(self):
        return "%s" % (self.type or "unformatted")

    @property
    def type(self):
        return self._type

    @property
    def mountable(self):
        """ Whether this format carries a filesystem that can be mounted. """
        return self.type not in (None, "swap") and self.mountpoint is not None


register_device_format(DeviceFormat)

# import the format modules so that they register their classes
from . import disklabel, luks, lvmpv  # noqa: E402,F401 pylint: disable=wrong-import-position
