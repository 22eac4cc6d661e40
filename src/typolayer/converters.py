"""Argument converters used by the typography setters.

Each converter takes a single value and returns the converted value or raises
InvalidArgument with a message naming what was expected.
"""

from dataclasses import dataclass
from numbers import Number
from typing import Callable

from typolayer.constants import InvalidArgument


@dataclass(frozen=True)
class Converter:
    """A named single argument conversion."""

    name: str
    func: Callable

    def __call__(self, value):
        return self.func(value)

    def __repr__(self):
        return self.name

    @property
    def __name__(self):
        return self.name


def converter(func: Callable) -> Converter:
    return Converter(func.__name__, func)


def is_number(value):
    """True for real numbers, bools excluded."""
    return isinstance(value, Number) and not isinstance(value, bool)


def _fail(expected, value):
    raise InvalidArgument(
        'expected %s but got "%r" of type %s' % (expected, value, value.__class__.__name__))


@converter
def str_or_number(value):
    """The string form of a str or number value."""
    if isinstance(value, str):
        return value
    if is_number(value):
        return str(value)
    _fail('a string or number', value)


@converter
def str_strict(value):
    if not isinstance(value, str):
        _fail('a string', value)
    return value


@converter
def number_strict(value):
    """The value as a float, numbers only."""
    if not is_number(value):
        _fail('a number', value)
    return float(value)


@converter
def positive_float(value):
    converted = number_strict(value)
    if not converted > 0:
        _fail('a value greater than 0', value)
    return converted


@converter
def non_negative_float(value):
    converted = number_strict(value)
    if converted < 0:
        _fail('a value of 0 or more', value)
    return converted


def one_of(*converters: Converter) -> Converter:
    """A converter returning the result of the first of converters that accepts the value."""
    name = 'one_of(%s)' % ', '.join(c.__name__ for c in converters)

    def convert(value):
        for conv in converters:
            try:
                return conv(value)
            except InvalidArgument:
                pass
        raise InvalidArgument("The value %r can't convert using %s" % (value, name))

    return Converter(name, convert)


def of_set(*allowed) -> Converter:
    """A converter accepting only the given values."""
    allowed = tuple(allowed)
    name = 'of_set%r' % (allowed,)

    def convert(value):
        if value not in allowed:
            raise InvalidArgument('%r is not allowed with %s.' % (value, name))
        return value

    return Converter(name, convert)
