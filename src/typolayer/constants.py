"""
Typography constants and exceptions.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, repr=False)
class TypoConstant(object):
    """Defines a named host enumeration value.

    The value is what gets handed to the host, the name is used for display only.
    """
    value: str = field(compare=True)
    name: str = field(compare=False)
    group: str = field(compare=True, default='')

    def __repr__(self):
        return self.name


# Rectangle interpretation modes.
CORNER = TypoConstant('corner', 'CORNER', 'RectMode')
CORNERS = TypoConstant('corners', 'CORNERS', 'RectMode')
CENTER = TypoConstant('center', 'CENTER', 'RectMode')
RADIUS = TypoConstant('radius', 'RADIUS', 'RectMode')
RECT_MODES = (CORNER, CORNERS, CENTER, RADIUS)


class _Namespace(object):
    """Groups constants the way the host enumerations are grouped e.g. Justification.LEFT_ALIGN."""

    def __init__(self, group, *names):
        self._group = group
        self._values = tuple(TypoConstant(n.lower(), '%s.%s' % (group, n), group) for n in names)
        for name, value in zip(names, self._values):
            setattr(self, name, value)

    def values(self):
        return self._values

    def __contains__(self, value):
        return value in self._values

    def __repr__(self):
        return self._group


Justification = _Namespace(
    'Justification',
    'AWAY_FROM_BINDING_SIDE',
    'CENTER_ALIGN',
    'CENTER_JUSTIFIED',
    'FULLY_JUSTIFIED',
    'LEFT_ALIGN',
    'LEFT_JUSTIFIED',
    'RIGHT_ALIGN',
    'RIGHT_JUSTIFIED',
    'TO_BINDING_SIDE',
)

VerticalJustification = _Namespace(
    'VerticalJustification',
    'BOTTOM_ALIGN',
    'CENTER_ALIGN',
    'JUSTIFY_ALIGN',
    'TOP_ALIGN',
)

Leading = _Namespace('Leading', 'AUTO')

AnchorPoint = _Namespace('AnchorPoint', 'TOP_LEFT_ANCHOR', 'CENTER_ANCHOR')

CoordinateSpace = _Namespace('CoordinateSpace', 'PASTEBOARD_COORDINATES')

ContentType = _Namespace('ContentType', 'TEXT_TYPE', 'GRAPHIC_TYPE', 'UNASSIGNED')

# The shape of a host object as seen by the attribute propagator and placement code.
TargetKind = _Namespace(
    'TargetKind',
    'DOCUMENT',
    'SPREAD',
    'PAGE',
    'LAYER',
    'STORY',
    'TEXT_FRAME',
    'TEXT_PATH',
    'TEXT_RANGE',
    'SHAPE',
    'GRAPHIC_LINE',
    'GROUP',
    'POLYGON',
    'CHARACTER_STYLE',
    'PARAGRAPH_STYLE',
    'UNRESOLVABLE',
)

CONTAINER_KINDS = frozenset((
    TargetKind.DOCUMENT, TargetKind.SPREAD, TargetKind.PAGE, TargetKind.LAYER))
TEXT_HOLDER_KINDS = frozenset((TargetKind.STORY, TargetKind.TEXT_FRAME, TargetKind.TEXT_PATH))


LOREM = (
    'Lorem ipsum is dolor sit amet, consectetur adipisicing elit, sed do eiusmod tempor '
    'incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud '
    'exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat. Duis aute irure '
    'dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur.'
)


# Exceptions for dealing with argument checking and host failures.
class TypoBaseException(Exception):
    """Base exception functionality"""


class InvalidArgument(TypoBaseException):
    """Call made with arguments of the wrong type or shape."""


class StyleNotFound(TypoBaseException):
    """A named style was required but does not exist in the document."""


class HostRejection(TypoBaseException):
    """The host refused a property assignment."""


class StaleReference(TypoBaseException):
    """A host reference was used after the object it denotes went away."""


class StaleReferenceWarning(UserWarning):
    """A stale host reference was passed and the operation was skipped."""


class FontNotInstalledWarning(UserWarning):
    """A requested font is not installed so the current font is kept."""
