# luks.py
# Device format classes for anaconda's storage configuration module.
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

from ..size import Size
from . import DeviceFormat, register_device_format

LUKS_METADATA_SIZE = Size("16 MiB")


class LUKS(DeviceFormat):

    """ A LUKS encryption header on a partition. """
    _type = "luks"

    def __init__(self, passphrase=None, **kwargs):
        """
            :keyword str passphrase: the passphrase used to unlock the device
        """
        super(LUKS, self).__init__(**kwargs)
        self.__passphrase = passphrase

    def __repr__(self):
        return super(LUKS, self).__repr__() + "  has_passphrase = %s\n" % self.has_key

    @property
    def has_key(self):
        return bool(self.__passphrase)

    def _set_passphrase(self, passphrase):
        self.__passphrase = passphrase

    # the passphrase can be set but never read back
    passphrase = property(fset=_set_passphrase)


register_device_format(LUKS)
