# size.py
# Python module to represent storage sizes
#
# Copyright (C) 2010  Red Hat, Inc.
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

import re
from collections import namedtuple
from decimal import Decimal, InvalidOperation
from decimal import ROUND_DOWN, ROUND_UP, ROUND_HALF_UP  # pylint: disable=unused-import

from .errors import UnderflowError

_Prefix = namedtuple("_Prefix", ["factor", "prefix", "abbr"])

_DECIMAL_FACTOR = 10 ** 3
_BINARY_FACTOR = 2 ** 10

# Order matters: human_readable() walks these from the smallest unit up.
_BINARY_PREFIXES = [_Prefix(_BINARY_FACTOR ** 1, "kibi", "Ki"),
                    _Prefix(_BINARY_FACTOR ** 2, "mebi", "Mi"),
                    _Prefix(_BINARY_FACTOR ** 3, "gibi", "Gi"),
                    _Prefix(_BINARY_FACTOR ** 4, "tebi", "Ti"),
                    _Prefix(_BINARY_FACTOR ** 5, "pebi", "Pi"),
                    _Prefix(_BINARY_FACTOR ** 6, "exbi", "Ei")]

_DECIMAL_PREFIXES = [_Prefix(_DECIMAL_FACTOR ** 1, "kilo", "K"),
                     _Prefix(_DECIMAL_FACTOR ** 2, "mega", "M"),
                     _Prefix(_DECIMAL_FACTOR ** 3, "giga", "G"),
                     _Prefix(_DECIMAL_FACTOR ** 4, "tera", "T"),
                     _Prefix(_DECIMAL_FACTOR ** 5, "peta", "P"),
                     _Prefix(_DECIMAL_FACTOR ** 6, "exa", "E")]

_BYTES = ("b", "byte", "bytes")
_UNLIMITED_SPECS = ("unlimited", "infinity", "inf")

_SPEC_RE = re.compile(r"^\s*(?P<number>[0-9]*\.?[0-9]*(?:[eE][-+]?[0-9]+)?)\s*(?P<unit>[a-zA-Z]*)\s*$")


def _parse_unit(unit):
    """ Return the factor of the unit named by unit.

        :param str unit: a unit specifier like "MiB", "mb", "gigabytes" or ""
        :returns: the number of bytes in one such unit
        :rtype: int or NoneType

        Returns None if the unit is not recognized.
    """
    lower = unit.lower()
    if not lower or lower in _BYTES:
        return 1

    for prefix in _BINARY_PREFIXES + _DECIMAL_PREFIXES:
        abbr = prefix.abbr.lower()
        if lower in (abbr, abbr + "b", prefix.prefix + "byte", prefix.prefix + "bytes"):
            return prefix.factor

    return None


def _parse_spec(spec):
    """ Parse a string like "10 GiB" and return the number of bytes.

        :param str spec: the size specification
        :rtype: :class:`decimal.Decimal`
        :raises ValueError: if spec cannot be parsed
    """
    if spec.strip().lower() in _UNLIMITED_SPECS:
        return Decimal("Infinity")

    m = _SPEC_RE.match(spec)
    if not m or not m.group("number"):
        raise ValueError("invalid size specification: '%s'" % spec)

    factor = _parse_unit(m.group("unit"))
    if factor is None:
        raise ValueError("invalid size unit in '%s'" % spec)

    try:
        number = Decimal(m.group("number"))
    except InvalidOperation:
        raise ValueError("invalid size specification: '%s'" % spec)

    return number * factor


class Size(Decimal):

    """ Common class to represent storage device and free space sizes.

        Can handle parsing strings such as 45MB or 6.7GiB to initialize
        itself, or can be initialized with a numerical size in bytes.
        Also generates human readable strings to a specified number of
        decimal places.

        A size is never negative: subtracting a bigger size from a smaller
        one raises :class:`~.errors.UnderflowError` instead of clamping.
        :data:`UNLIMITED` is a size bigger than any finite one.
    """

    def __new__(cls, value=0):
        """ Initialize a new Size object.

            :param value: a size, a number of bytes or a string spec
            :type value: :class:`Size`, int, :class:`decimal.Decimal` or str
            :raises ValueError: on negative, NaN or unparseable values
        """
        if isinstance(value, Size):
            return value

        if isinstance(value, str):
            size = _parse_spec(value)
        elif isinstance(value, (int, Decimal)):
            size = Decimal(value)
        elif isinstance(value, float):
            size = Decimal(repr(value))
        else:
            raise ValueError("invalid value %r for size" % (value,))

        if size.is_nan():
            raise ValueError("size cannot be NaN")

        if size < 0:
            raise ValueError("size cannot be negative: %s" % size)

        if size.is_finite():
            size = size.to_integral_value(rounding=ROUND_DOWN)

        return Decimal.__new__(cls, size)

    def __repr__(self):
        return "Size (%s)" % self.human_readable()

    def __str__(self):
        return self.human_readable()

    def __format__(self, format_spec):
        if not format_spec:
            return str(self)
        return Decimal.__format__(Decimal(self), format_spec)

    # Sizes are immutable, no point in copying them. Decimal's own versions
    # rebuild the object from str(), which is human readable and lossy here.
    def __copy__(self):
        return self

    def __deepcopy__(self, memo_dict):
        return self

    def __reduce__(self):
        return (self.__class__, (Decimal.__str__(self),))

    @property
    def unlimited(self):
        """ True if this is the unlimited size. """
        return self.is_infinite()

    def get_bytes(self):
        """ Return the number of bytes as an int (or infinity). """
        if self.unlimited:
            return float("inf")
        return int(self)

    def __neg__(self):
        raise ValueError("sizes cannot be negated")

    def __abs__(self):
        return self

    def __add__(self, other):
        return Size(Decimal.__add__(Decimal(self), _as_decimal(other)))

    # needed to make sum() work with Size arguments
    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = _as_decimal(other)
        if self.unlimited and other.is_infinite():
            raise ValueError("cannot subtract an unlimited size from an unlimited size")

        if other > self:
            raise UnderflowError("cannot subtract %s from %s" % (Size(other), self))

        return Size(Decimal.__sub__(Decimal(self), other))

    def __rsub__(self, other):
        return Size(other).__sub__(self)

    def __mul__(self, other):
        if isinstance(other, Size):
            raise ValueError("cannot multiply a size by a size")
        if isinstance(other, float):
            other = Decimal(repr(other))
        return Size(Decimal.__mul__(Decimal(self), other))
    __rmul__ = __mul__

    def __truediv__(self, other):
        """ Size / Size is a ratio, Size / number is a size. """
        if isinstance(other, Size):
            return Decimal.__truediv__(Decimal(self), Decimal(other))
        if isinstance(other, float):
            other = Decimal(repr(other))
        return Size(Decimal.__truediv__(Decimal(self), other))

    def __floordiv__(self, other):
        """ Size // Size is a count, Size // number is a size. """
        if isinstance(other, Size):
            return Decimal.__floordiv__(Decimal(self), Decimal(other))
        return Size(Decimal.__floordiv__(Decimal(self), other))

    def __mod__(self, other):
        return Size(Decimal.__mod__(Decimal(self), _as_decimal(other)))

    def convert_to(self, spec=None):
        """ Return the size in the units indicated by the specifier.

            :param spec: a units specifier, defaults to bytes
            :type spec: :class:`Size` (like MiB) or str (like "MiB")
            :returns: a numeric value in the units indicated by the specifier
            :rtype: :class:`decimal.Decimal`
            :raises ValueError: if the unit is zero or not recognized
        """
        if spec is None:
            return Decimal(self)

        if isinstance(spec, str):
            factor = _parse_unit(spec)
            if factor is None:
                raise ValueError("invalid unit specifier '%s'" % spec)
            spec = Size(factor)

        if spec == Size(0):
            raise ValueError("cannot convert to 0 size")

        return Decimal(self) / Decimal(spec)

    def human_readable(self, max_places=2):
        """ Return a string representation of this size with appropriate
            size specifier and in the specified number of decimal places.
            Values are always represented using binary not decimal units.
            For example, if the number of bytes represented by this size
            is 65531, expect the representation to be something like
            64 KiB, not 65.53 KB.

            :param max_places: number of decimal places to use
            :type max_places: int or NoneType
            :returns: a representation of the size
            :rtype: str
        """
        if max_places is not None and not isinstance(max_places, int):
            raise ValueError("max_places must be an int or None")

        if self.unlimited:
            return "unlimited"

        value = Decimal(self)
        abbr = ""
        for prefix in _BINARY_PREFIXES:
            if value < prefix.factor:
                break
            abbr = prefix.abbr
            newvalue = Decimal(self) / prefix.factor
        if abbr:
            value = newvalue

        if max_places is not None:
            value = value.quantize(Decimal(1).scaleb(-max_places), rounding=ROUND_HALF_UP)

        # drop trailing zeros, keeping integral values free of an exponent
        text = "{0:f}".format(value)
        if "." in text:
            text = text.rstrip("0").rstrip(".")

        return "%s %sB" % (text, abbr)

    def round_to_nearest(self, size, rounding):
        """ Rounds to nearest unit specified as a Size.

            :param size: a size specifier
            :type size: :class:`Size` like MiB
            :keyword rounding: which direction to round
            :type rounding: one of ROUND_UP, ROUND_DOWN, or ROUND_HALF_UP
            :returns: Size rounded to nearest whole specified unit
            :rtype: :class:`Size`

            If size is Size(0), the size is returned unchanged. The unlimited
            size is never rounded.
        """
        if rounding not in (ROUND_UP, ROUND_DOWN, ROUND_HALF_UP):
            raise ValueError("invalid rounding specifier")

        size = Size(size)
        if size == Size(0) or self.unlimited:
            return self

        if size.unlimited:
            raise ValueError("invalid rounding size: %s" % size)

        units = (Decimal(self) / Decimal(size)).to_integral_value(rounding=rounding)
        return Size(units * Decimal(size))

    def ceil_to(self, grain):
        """ Round this size up to a multiple of grain. """
        return self.round_to_nearest(grain, rounding=ROUND_UP)

    def floor_to(self, grain):
        """ Round this size down to a multiple of grain. """
        return self.round_to_nearest(grain, rounding=ROUND_DOWN)


def _as_decimal(value):
    if isinstance(value, Size):
        return Decimal(value)
    return Decimal(Size(value))


def sum_sizes(sizes, rounding=None):
    """ Return the sum of a list of sizes.

        :param sizes: the sizes to add up
        :type sizes: iterable of :class:`Size`
        :keyword rounding: if given, every size is rounded up to a multiple
                           of it before adding it to the total
        :type rounding: :class:`Size`
        :rtype: :class:`Size`

        Rounding each element is a pessimistic way to find out the space
        needed by a set of devices that must be aligned to rounding.
    """
    total = Size(0)
    for size in sizes:
        size = Size(size)
        if rounding is not None:
            size = size.ceil_to(rounding)
        total += size
    return total


B = Size(1)
KiB = Size(_BINARY_FACTOR ** 1)
MiB = Size(_BINARY_FACTOR ** 2)
GiB = Size(_BINARY_FACTOR ** 3)
TiB = Size(_BINARY_FACTOR ** 4)
PiB = Size(_BINARY_FACTOR ** 5)
EiB = Size(_BINARY_FACTOR ** 6)

KB = Size(_DECIMAL_FACTOR ** 1)
MB = Size(_DECIMAL_FACTOR ** 2)
GB = Size(_DECIMAL_FACTOR ** 3)
TB = Size(_DECIMAL_FACTOR ** 4)
PB = Size(_DECIMAL_FACTOR ** 5)
EB = Size(_DECIMAL_FACTOR ** 6)

UNLIMITED = Size("unlimited")
