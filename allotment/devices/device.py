# devices/device.py
# Base class for all devices.
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

import pprint

from .. import util
from ..storage_log import log_method_call

import logging
log = logging.getLogger("allotment")

from .lib import ParentList


class Device(util.ObjectID):

    """ A generic device.

        Device instances know which devices they depend upon (parents
        attribute) and which devices depend upon them (children attribute).
        Both lists are kept consistent: adding a parent registers this device
        as one of the parent's children.

        A device belongs to at most one :class:`~.devicegraph.Devicegraph`,
        which is recorded in the devicegraph attribute once the device has
        been added to it.
    """

    _type = "device"

    def __init__(self, name, parents=None):
        """
            :param name: the device name
            :type name: str
            :keyword parents: a list of parent devices
            :type parents: list of :class:`Device` instances
        """
        util.ObjectID.__init__(self)
        self._name = name
        if parents is not None and not isinstance(parents, list):
            raise ValueError("parents must be a list of Device instances")

        self.devicegraph = None
        self._children = []
        self.parents = parents or []

    def __repr__(self):
        s = ("%(type)s instance (%(id)s) --\n"
             "  name = %(name)s  id = %(dev_id)s\n"
             "  children = %(children)s\n"
             "  parents = %(parents)s\n" %
             {"type": self.__class__.__name__, "id": "%#x" % id(self),
              "name": self.name, "dev_id": self.id,
              "children": pprint.pformat([str(c) for c in self.children]),
              "parents": pprint.pformat([str(p) for p in self.parents])})
        return s

    def __str__(self):
        return "%s %s (%d)" % (self.type, self.name, self.id)

    def _add_parent(self, parent):
        """ Called before adding a parent to this device.

            See :attr:`~.ParentList.appendfunc`.
        """
        parent.add_child(self)

    def _remove_parent(self, parent):
        """ Called before removing a parent from this device.

            See :attr:`~.ParentList.removefunc`.
        """
        parent.remove_child(self)

    def _init_parent_list(self):
        """ Initialize this instance's parent list. """
        if not hasattr(self, "_parents"):
            # pylint: disable=attribute-defined-outside-init
            self._parents = ParentList(appendfunc=self._add_parent,
                                       removefunc=self._remove_parent)

        # iterate over a copy of the parent list because we are altering it in
        # the for-cycle
        for parent in list(self._parents):
            self._parents.remove(parent)

    @property
    def parents(self):
        """ Devices upon which this device is built """
        return self._parents

    @parents.setter
    def parents(self, parents):
        self._init_parent_list()
        for parent in parents:
            self._parents.append(parent)

    @property
    def children(self):
        """List of this device's immediate descendants."""
        return self._children[:]

    def remove_child(self, child):
        log_method_call(self, name=self.name, child=child.name, kids=len(self.children))
        self._children.remove(child)

    def add_child(self, child):
        log_method_call(self, name=self.name, child=child.name, kids=len(self.children))
        if child in self._children:
            raise ValueError("child is already accounted for")

        self._children.append(child)

    def depends_on(self, dep):
        """ Return True if this device depends on dep.

            This device depends on another device if the other device is an
            ancestor of this device. For example, a PartitionDevice depends on
            the DiskDevice on which it resides.

            :param dep: the other device
            :type dep: :class:`Device`
            :returns: whether this device depends on 'dep'
            :rtype: bool
        """
        if dep in self.parents:
            return True

        return any(parent.depends_on(dep) for parent in self.parents)

    @property
    def name(self):
        """ This device's name """
        return self._name

    @property
    def isleaf(self):
        """ True if no other device depends on this one. """
        return not bool(self.children)

    @property
    def type(self):
        """ Device type. """
        return self._type

    @property
    def ancestors(self):
        """ A list of all of this device's ancestors, including itself. """
        ancestors = set([self])
        for p in [d for d in self.parents if d not in ancestors]:
            ancestors.update(set(p.ancestors))
        return list(ancestors)

    @property
    def descendants(self):
        """ A list of all the devices built on top of this one. """
        descendants = []
        for child in self.children:
            for device in [child] + child.descendants:
                if device not in descendants:
                    descendants.append(device)
        return descendants
