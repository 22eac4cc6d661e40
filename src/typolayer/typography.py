"""Processing style typography on top of a desktop publishing host.

`Typography` is a session: it owns a host and a `TypographyContext`, places text
containers with `text()`, reads and writes text properties with `typo()` and
applies, resolves and outlines styled text.

    t = Typography(MemHost())
    t.text_size(24)
    frame = t.text('Hello', 50, 50, 100, 200)
    t.typo(frame, 'point_size')  # -> [24.0]
"""

from collections.abc import Callable, Mapping
import logging
import warnings

import anchorscad_lib.linear as l
from datatrees import datatree, dtfield

from typolayer import host
from typolayer.constants import (
    CENTER,
    CONTAINER_KINDS,
    CORNER,
    CORNERS,
    RADIUS,
    AnchorPoint,
    ContentType,
    CoordinateSpace,
    FontNotInstalledWarning,
    HostRejection,
    InvalidArgument,
    StaleReferenceWarning,
    StyleNotFound,
    TEXT_HOLDER_KINDS,
    TargetKind,
    TypoConstant,
)
from typolayer.context import TypographyContext
from typolayer.converters import is_number, str_or_number

log = logging.getLogger(__name__)


_BOUNDS = {
    CORNER: lambda x, y, w, h: (y, x, y + h, x + w),
    CORNERS: lambda x, y, w, h: (y, x, h, w),
    CENTER: lambda x, y, w, h: (y - h / 2, x - w / 2, y + h / 2, x + w / 2),
    RADIUS: lambda x, y, w, h: (y - h, x - w, y + h, x + w),
}


def rect_bounds(mode: TypoConstant, x, y, w, h) -> tuple:
    """Returns (top, left, bottom, right) for the given rectangle mode."""
    try:
        return _BOUNDS[mode](x, y, w, h)
    except KeyError:
        raise InvalidArgument('%r is not a rectangle mode' % (mode,)) from None


def anchored_matrix(matrix: l.GMatrix, x, y) -> l.GMatrix:
    """Returns the matrix that, applied about the anchor (x, y), has the effect of matrix."""
    return l.translate([-x, -y, 0]) * matrix * l.translate([x, y, 0])


@datatree(frozen=True)
class TargetResolution:
    """What a Text Target denotes: its kind and its text holders or ranges.

    Leaves are expanded to paragraphs only when reached, so a write on one leaf
    sees the current state of the next.
    """

    kind: TypoConstant
    leaves: tuple = ()

    @property
    def resolvable(self) -> bool:
        return self.kind != TargetKind.UNRESOLVABLE

    def groups(self):
        """Yields the paragraph-level ranges of each leaf, in document order."""
        for leaf in self.leaves:
            yield paragraphs_of(leaf)

    def units(self) -> list:
        return [unit for group in self.groups() for unit in group]


def paragraphs_of(leaf) -> list:
    """The paragraph-level ranges of a story, frame, text path or range."""
    if leaf.kind == TargetKind.TEXT_RANGE:
        return [leaf]
    if leaf.kind == TargetKind.TEXT_PATH:
        texts = leaf.texts()
        return texts[0].paragraphs() if texts else []
    return leaf.paragraphs()


def _frames(item):
    return tuple(item.text_frames())


def _itself(item):
    return (item,)


_RESOLVERS = dict.fromkeys(CONTAINER_KINDS, _frames)
_RESOLVERS.update(dict.fromkeys(TEXT_HOLDER_KINDS, _itself))
_RESOLVERS[TargetKind.TEXT_RANGE] = _itself


def resolve_target(item) -> TargetResolution:
    """Maps a Text Target to its resolution, UNRESOLVABLE if it is not one."""
    if not isinstance(item, host.HostObject):
        return TargetResolution(TargetKind.UNRESOLVABLE)
    resolver = _RESOLVERS.get(item.kind)
    if resolver is None:
        return TargetResolution(TargetKind.UNRESOLVABLE)
    return TargetResolution(item.kind, resolver(item))


@datatree(frozen=True)
class StyleFamily:
    """Everything that differs between character and paragraph style handling."""

    label: str
    style_kind: TypoConstant
    applied_property: str
    find: Callable
    add: Callable
    expand: Callable


CHARACTER_STYLES = StyleFamily(
    'character',
    TargetKind.CHARACTER_STYLE,
    host.APPLIED_CHARACTER_STYLE,
    find=lambda doc, name: doc.find_character_style(name),
    add=lambda doc, name: doc.add_character_style(name),
    expand=lambda holder: holder.characters(),
)

PARAGRAPH_STYLES = StyleFamily(
    'paragraph',
    TargetKind.PARAGRAPH_STYLE,
    host.APPLIED_PARAGRAPH_STYLE,
    find=lambda doc, name: doc.find_paragraph_style(name),
    add=lambda doc, name: doc.add_paragraph_style(name),
    expand=lambda holder: holder.paragraphs(),
)

STYLE_TARGET_KINDS = (TargetKind.TEXT_RANGE, TargetKind.TEXT_FRAME, TargetKind.STORY)
CLOSED_SHAPE_KINDS = (TargetKind.SHAPE, TargetKind.POLYGON)
OUTLINABLE_KINDS = (
    TargetKind.STORY, TargetKind.TEXT_FRAME, TargetKind.TEXT_PATH, TargetKind.TEXT_RANGE)
PATH_OWNER_KINDS = (TargetKind.GRAPHIC_LINE, TargetKind.SHAPE, TargetKind.POLYGON)


@datatree
class Typography:
    """A typography session bound to a host."""

    host: host.Host
    context: TypographyContext = dtfield(
        default=None, doc='Current attributes, seeded from the active document when None.')

    def __post_init__(self):
        if self.context is None:
            self.context = TypographyContext.from_document(self.host.active_document())

    def document(self) -> host.Document:
        return self.host.active_document()

    # Placement.

    def text(self, txt, x, y=None, w=None, h=None):
        """Places text and returns its container.

        Args:
            txt: The str or number to set as the contents.
            x: A rectangle, oval, polygon or text frame to fill with the text, a graphic
               line to run the text along, or the first of four numbers.
            y, w, h: The remaining numbers, read according to the rectangle mode.
        Returns:
            The text frame, or the text path when x is a graphic line.
        """
        if not (isinstance(txt, str) or is_number(txt)):
            raise InvalidArgument(
                'text(), the first parameter has to be a string but is %s. '
                'Use: text(txt, x, y, w, h)' % (txt.__class__.__name__,))
        contents = str_or_number(txt)

        if isinstance(x, host.HostObject) and y is None and w is None and h is None:
            container = self._place_in(contents, x)
        elif all(is_number(v) for v in (x, y, w, h)):
            container = self._place_frame(contents, x, y, w, h)
        else:
            raise InvalidArgument(
                'text(), invalid parameters. Use: text(txt, x, y, w, h) or text(txt, obj).')

        self.typo(container, self.context.text_properties())
        return container

    def _place_in(self, contents, item):
        if item.kind == TargetKind.TEXT_FRAME:
            container = item
        elif item.kind in CLOSED_SHAPE_KINDS:
            item.set_content_type(ContentType.TEXT_TYPE)
            container = item.elements()[0]
        elif item.kind == TargetKind.GRAPHIC_LINE:
            container = item.add_text_path()
        else:
            raise InvalidArgument(
                'text(), cannot place text in %r. Use a rectangle, oval, polygon, '
                'graphic line or text frame.' % (item,))
        container.set_contents(contents)
        return container

    def _place_frame(self, contents, x, y, w, h):
        ctxt = self.context
        bounds = rect_bounds(ctxt.rect_mode, x, y, w, h)
        frame = self.host.add_text_frame(self.host.current_page(), self.host.current_layer())
        frame.set_contents(contents)
        frame.geometric_bounds = bounds
        frame.set_vertical_justification(ctxt.y_align)
        anchor = (AnchorPoint.CENTER_ANCHOR if ctxt.rect_mode in (CENTER, RADIUS)
                  else AnchorPoint.TOP_LEFT_ANCHOR)
        frame.transform(
            CoordinateSpace.PASTEBOARD_COORDINATES, anchor, anchored_matrix(ctxt.matrix, x, y))
        log.debug('Placed text frame %r in %r mode', bounds, ctxt.rect_mode)
        return frame

    # Attributes.

    def typo(self, item, prop, value=None) -> list:
        """Reads or writes a text property on every paragraph of item.

        Containers (documents, spreads, pages, layers) apply to each of their text
        frames, stories, frames and text paths to each of their paragraphs, and a
        text range to itself.

        With a str prop and no value this is a getter and returns the values in
        document order. Otherwise prop (and value) or the prop mapping is written
        and the written ranges are returned. Paragraphs of a holder are written
        last to first since growing an earlier paragraph can push later ones out
        of the frame and invalidate them.
        """
        if isinstance(item, str):
            raise InvalidArgument(
                'typo() cannot work on strings. Please pass a Text object to modify.')
        if not isinstance(prop, (str, Mapping)):
            raise InvalidArgument(
                'typo(), property must be a name or a mapping of names to values, got %r'
                % (prop,))
        if isinstance(item, host.HostObject) and not item.is_valid():
            log.warning('typo(), invalid object passed: %r', item)
            warnings.warn('typo(), invalid object passed', StaleReferenceWarning, stacklevel=2)
            return []

        resolution = resolve_target(item)
        if not resolution.resolvable:
            raise InvalidArgument(
                'typo(), %r is not a document, spread, page, layer, story, text frame, '
                'text path or text.' % (item,))

        if isinstance(prop, str) and value is None:
            return [unit.get_property(prop) for unit in resolution.units()]

        result = []
        for group in resolution.groups():
            for unit in reversed(group):
                if isinstance(prop, str):
                    unit.set_property(prop, value)
                else:
                    for name, val in prop.items():
                        unit.set_property(name, val)
                result.append(unit)
        return result

    # Styles.

    def apply_character_style(self, text, style):
        """Applies a character style, given by instance or existing name, to text.

        A text frame or story is applied character by character and the list of
        characters is returned, otherwise the given text is returned.
        """
        return self._apply_style(CHARACTER_STYLES, text, style)

    def apply_paragraph_style(self, text, style):
        """Applies a paragraph style, given by instance or existing name, to text.

        A text frame or story is applied paragraph by paragraph and the list of
        paragraphs is returned, otherwise the given text is returned.
        """
        return self._apply_style(PARAGRAPH_STYLES, text, style)

    def character_style(self, text_or_name, props: Mapping = None):
        """Returns the applied character style of a text, or the style of that name.

        A missing name is created. props, if given, are assigned to the style.
        """
        return self._resolve_style(CHARACTER_STYLES, text_or_name, props)

    def paragraph_style(self, text_or_name, props: Mapping = None):
        """Returns the applied paragraph style of a text, or the style of that name.

        A missing name is created. props, if given, are assigned to the style.
        """
        return self._resolve_style(PARAGRAPH_STYLES, text_or_name, props)

    def _apply_style(self, family: StyleFamily, text, style):
        func = 'apply%sStyle()' % family.label.capitalize()
        if isinstance(style, str):
            name = style
            style = family.find(self.document(), name)
            if style is None:
                raise StyleNotFound(
                    '%s, a %s style named "%s" does not exist.' % (func, family.label, name))

        if not (isinstance(text, host.HostObject) and text.kind in STYLE_TARGET_KINDS) or not (
                isinstance(style, host.HostObject) and style.kind == family.style_kind):
            raise InvalidArgument(
                '%s, wrong parameters. Use: textObject|textFrame|story, %sStyle|name'
                % (func, family.label))

        if text.kind == TargetKind.TEXT_RANGE:
            text.set_property(family.applied_property, style)
            return text
        units = family.expand(text)
        for unit in reversed(units):
            unit.set_property(family.applied_property, style)
        return units

    def _resolve_style(self, family: StyleFamily, text_or_name, props):
        func = '%sStyle()' % family.label
        if props is not None and not isinstance(props, Mapping):
            raise InvalidArgument(
                '%s, wrong props parameter. Use object of property name/value pairs.' % func)
        if isinstance(text_or_name, host.HostObject) and text_or_name.kind == TargetKind.TEXT_RANGE:
            style = text_or_name.get_property(family.applied_property)
        elif isinstance(text_or_name, host.HostObject) and text_or_name.kind == family.style_kind:
            style = text_or_name
        elif isinstance(text_or_name, str):
            document = self.document()
            style = family.find(document, text_or_name)
            if style is None:
                style = family.add(document, text_or_name)
                log.debug('Created %s style %r', family.label, text_or_name)
        else:
            raise InvalidArgument(
                '%s, wrong parameters. Use: textObject|name and props. Props is optional.' % func)

        if props:
            try:
                style.set_properties(dict(props))
            except HostRejection as e:
                raise InvalidArgument(
                    '%s, wrong props parameter. Use object of property name/value pairs. (%s)'
                    % (func, e)) from e
        return style

    # Outlines.

    def create_outlines(self, item, cb: Callable = None):
        """Converts text to outlines.

        Args:
            item: A story, text frame, text path or text range, or a shape or graphic
                  line carrying a text path.
            cb: Optional, called as cb(polygon, index) for each resulting polygon.
        Returns:
            A single polygon, or a list of polygons when the text spans several lines
            or runs along a path. With cb, the list of callback results.
        """
        kind = item.kind if isinstance(item, host.HostObject) else TargetKind.UNRESOLVABLE
        if kind in OUTLINABLE_KINDS:
            outlines = item.create_outlines()
        elif kind in PATH_OWNER_KINDS:
            paths = item.text_paths()
            outlines = paths[0].texts()[0].create_outlines() if paths else []
        else:
            raise InvalidArgument(
                'createOutlines(), be sure to use: '
                'Story | TextFrame | Paragraph | Line | Word | Character | TextPath')

        if len(outlines) == 1:
            if outlines[0].kind == TargetKind.GROUP:
                return self._each(outlines[0].ungroup(), cb)
            if cb is None:
                return outlines[0]
        return self._each(outlines, cb)

    @staticmethod
    def _each(items, cb):
        if cb is None:
            return list(items)
        return [cb(item, i) for i, item in enumerate(items)]

    # Current attributes.

    def text_font(self, font_name: str = None, font_style: str = 'Regular'):
        """Returns the current font, first setting it if font_name is given.

        A font that is not installed is reported with a FontNotInstalledWarning and
        the current font is kept.
        """
        if font_name is None:
            return self.context.font
        font = self.host.find_font(font_name, font_style)
        if not font.installed:
            current = self.context.font
            current_name = '%s %s' % (current.family, current.style_name) if current else 'None'
            message = 'textFont(), font "%s %s" not installed. Using current font "%s" instead.' % (
                font_name, font_style, current_name)
            log.warning(message)
            warnings.warn(message, FontNotInstalledWarning, stacklevel=2)
        else:
            self.context.set_font(font)
        return self.context.font

    def text_size(self, point_size=None) -> float:
        if point_size is not None:
            self.context.set_font_size(point_size)
        return self.context.font_size

    def text_align(self, align=None, y_align=None) -> TypoConstant:
        """Returns the current Justification, first setting it (and y_align) if given."""
        if align is not None:
            self.context.set_align(align, y_align)
        elif y_align is not None:
            self.context.set_y_align(y_align)
        return self.context.align

    def text_leading(self, leading=None):
        if leading is not None:
            self.context.set_leading(leading)
        return self.context.leading

    def text_kerning(self, kerning=None) -> float:
        if kerning is not None:
            self.context.set_kerning(kerning)
        return self.context.kerning

    def text_tracking(self, tracking=None) -> float:
        if tracking is not None:
            self.context.set_tracking(tracking)
        return self.context.tracking

    def rect_mode(self, mode=None) -> TypoConstant:
        if mode is not None:
            self.context.set_rect_mode(mode)
        return self.context.rect_mode

    def fill(self, color=None) -> str:
        if color is not None:
            self.context.set_fill_color(color)
        return self.context.fill_color

    def translate(self, tx, ty):
        self.context.translate(tx, ty)

    def rotate(self, degrees):
        self.context.rotate(degrees)

    def scale(self, sx, sy=None):
        self.context.scale(sx, sy)

    def reset_matrix(self):
        self.context.reset_matrix()

