# partitioning.py
# Distribution of free space among planned devices.
#
# Copyright (C) 2009, 2010, 2011, 2012, 2013  Red Hat, Inc.
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

from decimal import Decimal

from .errors import NoDiskSpaceError
from .size import Size, B, sum_sizes

import logging
log = logging.getLogger("allotment")


class Request(object):

    """ A request for space by a planned device.

        Request instances are used for calculating how much to grow
        devices. All amounts are in units of the chunk's granularity.
    """

    def __init__(self, device, unit):
        """
            :param device: the device being requested
            :type device: a planned device, with min_size, max_size and weight
            :param unit: the allocation granularity
            :type unit: :class:`~.size.Size`
        """
        self.device = device
        self.growth = 0                     # growth in units
        self.max_growth = 0                 # max growth in units, 0 is unlimited
        self.done = False                   # can we grow this request more?
        self.base = int(device.min_size.ceil_to(unit) // unit)

        if not device.max_size.unlimited:
            self.max_growth = int(device.max_size // unit) - self.base
            if self.max_growth <= 0:
                # max size is less than or equal to base, so we're done
                self.max_growth = 0
                self.done = True

    def __repr__(self):
        s = ("%(type)s instance --\n"
             "device = %(device)s  base = %(base)d  growth = %(growth)d\n"
             "max_grow = %(max_grow)d  done = %(done)s" %
             {"type": self.__class__.__name__, "device": self.device,
              "base": self.base, "growth": self.growth,
              "max_grow": self.max_growth, "done": self.done})
        return s

    @property
    def weight(self):
        return self.device.weight or 0


class Chunk(object):

    """ A free space from which devices will be allocated """

    def __init__(self, length, unit, requests=None):
        """
            :param length: the length of the chunk, in units
            :type length: int
            :param unit: the size of one unit
            :type unit: :class:`~.size.Size`
            :keyword requests: list of requests to add
            :type requests: list of :class:`Request`
        """
        self.length = length
        self.unit = unit
        self.pool = length                  # free unit count
        self.requests = []                  # list of Request instances
        for req in requests or []:
            self.add_request(req)

        # devices with a weight are grown according to it, otherwise the
        # growth is proportional to the base size
        self.weighted = any(req.weight for req in self.requests)

    def __repr__(self):
        s = ("%(type)s instance --\n"
             "length = %(length)d  size = %(size)s\n"
             "remaining = %(rem)d  pool = %(pool)d" %
             {"type": self.__class__.__name__,
              "length": self.length, "size": self.length_to_size(self.length),
              "pool": self.pool, "rem": self.remaining})
        return s

    def add_request(self, req):
        """ Add a request to this chunk.

            :param req: the request to add
            :type req: :class:`Request`
        """
        self.requests.append(req)
        self.pool -= req.base

    @property
    def growth(self):
        """ Sum of growth for all requests in this chunk. """
        return sum(r.growth for r in self.requests)

    @property
    def remaining(self):
        """ Number of requests still being grown in this chunk. """
        return len([d for d in self.requests if not d.done])

    @property
    def done(self):
        """ True if we are finished growing all requests in this chunk. """
        return self.remaining == 0 or self.pool <= 0

    def length_to_size(self, length):
        return self.unit * length

    def _share_key(self, req):
        return req.weight if self.weighted else req.base

    def trim_over_grown_request(self, req):
        """ Enforce max growth and return extra units to the pool. """
        if req.max_growth and req.growth >= req.max_growth:
            if req.growth > req.max_growth:
                # we've grown beyond the maximum. put some back.
                extra = req.growth - req.max_growth
                log.debug("taking back %d (%s) from %s", extra, self.length_to_size(extra),
                          req.device)
                self.pool += extra
                req.growth = req.max_growth

            req.done = True

    def grow_requests(self):
        """ Calculate growth amounts for requests in this chunk.

            Given a total number of available units, requests receive an
            allotment proportional to their weights, or to their base sizes if
            no request has a weight. That means a request with base size 1000
            will grow four times as fast as a request with base size 250. When
            all the remaining requests have a zero base, they grow uniformly.
        """
        log.debug("Chunk.grow_requests: %r", self)

        last_pool = 0  # used to track changes to the pool across iterations
        while not self.done and last_pool != self.pool:
            last_pool = self.pool    # to keep from getting stuck
            growing = [p for p in self.requests if not p.done]
            total = sum(self._share_key(p) for p in growing)

            log.debug("%d requests and %s (%s) left in chunk",
                      self.remaining, self.pool, self.length_to_size(self.pool))
            for p in growing:
                if total:
                    share = Decimal(self._share_key(p)) / Decimal(total)
                    growth = int(share * last_pool)  # truncate, don't round
                else:
                    growth = last_pool // len(growing)

                p.growth += growth
                self.pool -= growth
                self.trim_over_grown_request(p)
                log.debug("new grow amount for %s is %s units, or %s",
                          p.device, p.growth, self.length_to_size(p.growth))

        if self.pool > 0:
            # allocate any leftovers in pool to the first request
            # that can still grow
            for p in self.requests:
                if p.done:
                    continue

                p.growth += self.pool
                self.pool = 0
                self.trim_over_grown_request(p)
                if self.pool == 0:
                    break

    def sizes(self):
        return [self.length_to_size(r.base + r.growth) for r in self.requests]


def distribute_space(devices, space, rounding=None, fit_last=False):
    """ Distribute the given space among the planned devices.

        :param devices: the planned devices, in placement order
        :type devices: list of planned devices with min_size, max_size and
                       weight attributes
        :param space: the space to distribute
        :type space: :class:`~.size.Size`
        :keyword rounding: every size is a multiple of this, one byte by default
        :type rounding: :class:`~.size.Size`
        :keyword bool fit_last: whether the last device sits at the end of the
                                space, so it can end on a non-aligned position
        :returns: one size per device, in the same order
        :rtype: list of :class:`~.size.Size`
        :raises: :class:`~.errors.NoDiskSpaceError` if the minima do not fit

        Every device gets at least its minimum, rounded up to rounding, and
        the rest of the space is shared out without exceeding any maximum.

        With fit_last, the last device may get its minimum without rounding
        when that is the only way to fit all the devices. It also absorbs the
        part of the space that is smaller than one rounding unit.
    """
    unit = Size(rounding or B)
    space = Size(space)
    if not devices:
        return []

    length = int(space // unit)
    remainder = space - unit * length
    requests = [Request(d, unit) for d in devices]
    log.debug("distributing %s among %d devices in units of %s", space, len(devices), unit)

    if sum(r.base for r in requests) > length:
        last = devices[-1]
        others = sum_sizes([unit * r.base for r in requests[:-1]])
        if not fit_last or others > space or space - others < last.min_size:
            raise NoDiskSpaceError("the devices do not fit in %s (%s needed)" %
                                   (space, sum_sizes([d.min_size for d in devices], rounding=unit)))

        # the last one takes exactly what is left, there is no room to grow
        log.debug("%s only fits if placed last", last)
        return [unit * r.base for r in requests[:-1]] + [space - others]

    chunk = Chunk(length, unit, requests)
    chunk.grow_requests()
    sizes = chunk.sizes()

    if fit_last and remainder:
        last = devices[-1]
        if sizes[-1] + remainder <= last.max_size:
            sizes[-1] += remainder

    log.debug("distributed sizes: %s", [str(s) for s in sizes])
    return sizes
