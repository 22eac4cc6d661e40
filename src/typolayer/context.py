"""The current typography attributes of a session."""

import dataclasses
import logging

import anchorscad_lib.linear as l
from datatrees import datatree, dtfield

from typolayer import host
from typolayer.constants import (
    CORNER,
    RECT_MODES,
    Justification,
    Leading,
    TypoConstant,
    VerticalJustification,
)
from typolayer.converters import (
    non_negative_float,
    number_strict,
    of_set,
    one_of,
    positive_float,
    str_strict,
)

log = logging.getLogger(__name__)

JUSTIFICATION = of_set(*Justification.values())
VERTICAL_JUSTIFICATION = of_set(*VerticalJustification.values())
RECT_MODE = of_set(*RECT_MODES)
LEADING = one_of(of_set(Leading.AUTO), non_negative_float)


@datatree
class TypographyContext:
    """Attributes stamped onto every newly placed text container.

    Fields are read directly, the set_* methods validate before assigning so a
    rejected value leaves the previous one in place.
    """

    font: object = dtfield(default=None, doc='The host font used for new text.')
    font_size: float = dtfield(default=12.0, doc='Point size, always greater than 0.')
    fill_color: str = dtfield(default='Black', doc='Swatch name of the text fill.')
    align: TypoConstant = dtfield(default=Justification.LEFT_ALIGN, doc='A Justification value.')
    y_align: TypoConstant = dtfield(
        default=VerticalJustification.TOP_ALIGN, doc='A VerticalJustification value.')
    leading: object = dtfield(default=Leading.AUTO, doc='Points or Leading.AUTO.')
    kerning: float = dtfield(default=0.0, doc='Kerning value in thousandths of an em.')
    tracking: float = dtfield(default=0.0, doc='Tracking in thousandths of an em.')
    rect_mode: TypoConstant = dtfield(default=CORNER, doc='How text(x, y, w, h) reads its numbers.')
    matrix: l.GMatrix = dtfield(
        default_factory=lambda: l.IDENTITY, doc='Transform applied to placed text frames.')
    _initial: dict = dtfield(default=None, init=False)

    def __post_init__(self):
        self._initial = {f.name: getattr(self, f.name) for f in dataclasses.fields(self) if f.init}

    @classmethod
    def from_document(cls, document: host.Document) -> 'TypographyContext':
        """Seeds a context with the text defaults of the document."""
        defaults = document.text_defaults()
        return cls(
            font=defaults[host.APPLIED_FONT],
            font_size=defaults[host.POINT_SIZE],
            fill_color=defaults[host.FILL_COLOR],
            align=defaults[host.JUSTIFICATION],
            leading=defaults[host.LEADING],
            kerning=defaults[host.KERNING_VALUE],
            tracking=defaults[host.TRACKING],
        )

    def reset(self):
        """Restores the values the context was created with."""
        for name, value in self._initial.items():
            setattr(self, name, value)
        log.debug("Reset typography context")
        return self

    def text_properties(self) -> dict:
        """The attributes as host text properties, as written onto placed text."""
        return {
            host.APPLIED_FONT: self.font,
            host.POINT_SIZE: self.font_size,
            host.FILL_COLOR: self.fill_color,
            host.JUSTIFICATION: self.align,
            host.LEADING: self.leading,
            host.KERNING_VALUE: self.kerning,
            host.TRACKING: self.tracking,
        }

    def set_font(self, font):
        self.font = font
        return self

    def set_font_size(self, size):
        self.font_size = positive_float(size)
        return self

    def set_fill_color(self, color):
        self.fill_color = str_strict(color)
        return self

    def set_align(self, align, y_align=None):
        align = JUSTIFICATION(align)
        if y_align is not None:
            self.y_align = VERTICAL_JUSTIFICATION(y_align)
        self.align = align
        return self

    def set_y_align(self, y_align):
        self.y_align = VERTICAL_JUSTIFICATION(y_align)
        return self

    def set_leading(self, leading):
        self.leading = LEADING(leading)
        return self

    def set_kerning(self, kerning):
        self.kerning = number_strict(kerning)
        return self

    def set_tracking(self, tracking):
        self.tracking = number_strict(tracking)
        return self

    def set_rect_mode(self, mode):
        self.rect_mode = RECT_MODE(mode)
        return self

    def set_matrix(self, matrix: l.GMatrix):
        self.matrix = matrix
        return self

    def reset_matrix(self):
        self.matrix = l.IDENTITY
        return self

    def translate(self, tx, ty):
        self.matrix = self.matrix * l.translate([number_strict(tx), number_strict(ty), 0])
        return self

    def rotate(self, degrees):
        # Positive angles turn clockwise on a y-down page.
        self.matrix = self.matrix * l.rotZ(number_strict(degrees))
        return self

    def scale(self, sx, sy=None):
        sx = number_strict(sx)
        sy = sx if sy is None else number_strict(sy)
        self.matrix = self.matrix * l.scale([sx, sy, 1])
        return self
