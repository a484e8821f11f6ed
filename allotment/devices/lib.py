# devices/lib.py
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
from enum import Enum

from ..size import Size

LINUX_SECTOR_SIZE = Size(512)


class PartitionType(str, Enum):
    """Types of partitions in a partition table."""
    primary = 'primary'
    extended = 'extended'
    logical = 'logical'


class Region(object):

    """ A contiguous range of blocks on a disk.

        start and length are expressed in blocks of block_size bytes and end
        is inclusive, so a region of length 1 starts and ends on the same
        block.
    """

    def __init__(self, start, length, block_size=LINUX_SECTOR_SIZE):
        if start < 0 or length < 0:
            raise ValueError("region start and length must be non-negative")

        self.start = int(start)
        self.length = int(length)
        self.block_size = Size(block_size)

    def __repr__(self):
        return "Region(start=%d, length=%d, block_size=%d)" % (self.start, self.length,
                                                               int(self.block_size))

    def __eq__(self, other):
        if not isinstance(other, Region):
            return NotImplemented
        return (self.start, self.length, self.block_size) == \
            (other.start, other.length, other.block_size)

    def __hash__(self):
        return hash((self.start, self.length, self.block_size))

    @property
    def end(self):
        """ Last block of the region. """
        return self.start + self.length - 1

    @property
    def size(self):
        return self.block_size * self.length

    @property
    def start_offset(self):
        """ Distance in bytes from the beginning of the disk. """
        return self.block_size * self.start

    def contains(self, other):
        """ Whether other lies completely inside this region. """
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other):
        return self.start <= other.end and other.start <= self.end


class ParentList(object):

    """ A list with auditing and side-effects for additions and removals.

        The class provides an ordered list with guaranteed unique members and
        optional functions to run before adding or removing a member. It
        provides a subset of the functionality provided by :class:`list`,
        making it easy to ensure that changes pass through the check functions.

        The following operations are implemented:

        .. code::

            ml.append(x)
            ml.remove(x)
            iter(ml)
            len(ml)
            x in ml
            x = ml[i]   # not ml[i] = x
    """

    def __init__(self, items=None, appendfunc=None, removefunc=None):
        """
            :keyword items: initial contents
            :type items: any iterable
            :keyword appendfunc: a function to call before adding an item
            :type appendfunc: callable
            :keyword removefunc: a function to call before removing an item
            :type removefunc: callable

            The functions are called with the item about to be added or removed
            and should raise an exception if the change must not take place.
        """
        self.items = list(items or [])
        self.appendfunc = appendfunc or (lambda i: True)
        self.removefunc = removefunc or (lambda i: True)

    def __iter__(self):
        return iter(self.items)

    def __contains__(self, y):
        return y in self.items

    def __getitem__(self, i):
        return self.items[i]

    def __len__(self):
        return len(self.items)

    def append(self, y):
        """ Add an item to the list after running a callback. """
        if y in self.items:
            raise ValueError("item is already in the list")

        self.appendfunc(y)
        self.items.append(y)

    def remove(self, y):
        """ Remove an item from the list after running a callback. """
        if y not in self.items:
            raise ValueError("item is not in the list")

        self.removefunc(y)
        self.items.remove(y)
