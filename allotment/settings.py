# settings.py
# Settings for a storage proposal.
#
# Copyright (C) 2013  Red Hat, Inc.
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

from .errors import SettingsError
from .size import Size, UNLIMITED

# what to do with the existing partitions of the candidate disks
#   none: never delete them
#   ondemand: delete them one by one, only until the new ones fit
#   all: delete all of them first
DELETE_MODES = ("none", "ondemand", "all")


class ProposalSettings(object):

    def __init__(self):
        #
        # volumes
        #
        self.root_base_size = Size("3 GiB")
        self.root_max_size = Size("10 GiB")
        self.root_filesystem_type = "btrfs"

        # only meaningful with a btrfs root, which then grows by this
        # percentage to hold the snapshots
        self.use_snapshots = True
        self.snapshots_size_percentage = 300

        self.use_separate_home = True
        self.home_min_size = Size("10 GiB")
        self.home_max_size = UNLIMITED
        self.home_filesystem_type = "xfs"

        self.swap_size = Size("2 GiB")

        #
        # LVM and encryption
        #
        self.use_lvm = False
        self.lvm_vg_name = "system"

        # None or empty means no encryption
        self.encryption_password = None

        #
        # disks
        #
        # names of the disks to use, None for all of them
        self.candidate_disks = None
        self._delete_mode = "ondemand"

    def __repr__(self):
        attrs = ", ".join("%s=%s" % (k.lstrip("_"), v) for (k, v) in sorted(self.__dict__.items())
                          if k != "encryption_password")
        return "<ProposalSettings %s>" % attrs

    @property
    def delete_mode(self):
        return self._delete_mode

    @delete_mode.setter
    def delete_mode(self, mode):
        if mode not in DELETE_MODES:
            raise SettingsError("invalid delete mode '%s'" % mode)
        self._delete_mode = mode

    @property
    def use_encryption(self):
        return bool(self.encryption_password)

    def copy(self):
        """ Return an independent copy of these settings. """
        return copy.deepcopy(self)
