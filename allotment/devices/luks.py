# devices/luks.py
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

from ..formats.luks import LUKS_METADATA_SIZE
from ..size import Size

from .storage import StorageDevice


class LUKSDevice(StorageDevice):

    """ A mapped LUKS device. """
    _type = "luks/dm-crypt"
    _dev_dir = "/dev/mapper"

    @property
    def raw_device(self):
        return self.parents[0]

    def _get_size(self):
        raw_size = self.raw_device.size
        if raw_size <= LUKS_METADATA_SIZE:
            return Size(0)
        return raw_size - LUKS_METADATA_SIZE

    def _set_size(self, newsize):
        raise ValueError("the size of %s depends on %s" % (self.name, self.raw_device.name))
