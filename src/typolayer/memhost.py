"""In-memory host.

A small model of a desktop publishing document: spreads, pages, layers, stories,
text frames, text paths, shapes, styles and fonts. Text ranges are live references
that go stale when their story's contents are replaced or when they are pushed
out of the visible area of their frame (overset).

Text layout is deliberately crude: every paragraph is a single line whose height
is its leading, or 1.2 times its point size when the leading is Leading.AUTO.
"""

import logging
import re

import anchorscad_lib.linear as l
import numpy as np
from datatrees import datatree, dtfield

from typolayer import host
from typolayer.constants import (
    AnchorPoint,
    ContentType,
    CoordinateSpace,
    HostRejection,
    Justification,
    Leading,
    StaleReference,
    TargetKind,
    VerticalJustification,
)
from typolayer.converters import is_number

log = logging.getLogger(__name__)

AUTO_LEADING_FACTOR = 1.2
PARAGRAPH_LEVEL_PROPERTIES = frozenset((host.JUSTIFICATION, host.APPLIED_PARAGRAPH_STYLE))

DEFAULT_FONTS = (
    ('Minion Pro', 'Regular'),
    ('Minion Pro', 'Bold'),
    ('Minion Pro', 'Italic'),
    ('Helvetica', 'Regular'),
    ('Helvetica', 'Bold'),
    ('Courier', 'Regular'),
)


def extentsof(p: np.ndarray) -> np.ndarray:
    return np.array((p.min(axis=0), p.max(axis=0)))


@datatree(frozen=True)
class MemFont(host.Font):
    """A font as returned by MemHost.find_font()."""

    family_name: str
    style: str = 'Regular'
    is_installed: bool = True

    @property
    def family(self) -> str:
        return self.family_name

    @property
    def style_name(self) -> str:
        return self.style

    @property
    def installed(self) -> bool:
        return self.is_installed

    @property
    def full_name(self) -> str:
        return '%s\t%s' % (self.family_name, self.style)


def check_text_property(document, name, value):
    """Raises HostRejection if value is not acceptable for the named text property."""
    if name not in host.TEXT_PROPERTIES:
        raise HostRejection('%r is not a text property' % (name,))
    if name == host.APPLIED_FONT:
        if not isinstance(value, MemFont) or not value.installed:
            raise HostRejection('applied_font requires an installed font, got %r' % (value,))
    elif name == host.POINT_SIZE:
        if not is_number(value) or value <= 0:
            raise HostRejection('point_size must be a number greater than 0, got %r' % (value,))
    elif name == host.LEADING:
        if value != Leading.AUTO and (not is_number(value) or value < 0):
            raise HostRejection('leading must be Leading.AUTO or a number, got %r' % (value,))
    elif name in (host.KERNING_VALUE, host.TRACKING):
        if not is_number(value):
            raise HostRejection('%s must be a number, got %r' % (name, value))
    elif name == host.JUSTIFICATION:
        if value not in Justification:
            raise HostRejection('%r is not a Justification value' % (value,))
    elif name == host.FILL_COLOR:
        if not isinstance(value, str):
            raise HostRejection('fill_color must be a swatch name, got %r' % (value,))
    elif name == host.APPLIED_CHARACTER_STYLE:
        if not isinstance(value, MemCharacterStyle) or value.document is not document:
            raise HostRejection('%r is not a character style of this document' % (value,))
    elif name == host.APPLIED_PARAGRAPH_STYLE:
        if not isinstance(value, MemParagraphStyle) or value.document is not document:
            raise HostRejection('%r is not a paragraph style of this document' % (value,))


class _Removable(object):

    _removed = False

    def remove(self):
        self._removed = True

    def is_valid(self) -> bool:
        return not self._removed

    def _check_valid(self):
        if not self.is_valid():
            raise StaleReference('%r has been removed' % (self,))


class _MemStyle(_Removable):

    STYLE_PROPERTIES = frozenset(host.TEXT_PROPERTIES) - {
        host.APPLIED_CHARACTER_STYLE, host.APPLIED_PARAGRAPH_STYLE}

    def __init__(self, document, name):
        self.document = document
        self._name = name
        self.properties = {}

    @property
    def name(self) -> str:
        return self._name

    def set_properties(self, props: dict):
        if not isinstance(props, dict):
            raise HostRejection('style properties must be a dict, got %r' % (props,))
        for key, value in props.items():
            if key == 'name':
                if not isinstance(value, str):
                    raise HostRejection('style name must be a str, got %r' % (value,))
                continue
            if key not in self.STYLE_PROPERTIES:
                raise HostRejection('%r is not a style property' % (key,))
            check_text_property(self.document, key, value)
        for key, value in props.items():
            if key == 'name':
                self._name = value
            else:
                self.properties[key] = value

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self._name)


class MemCharacterStyle(_MemStyle, host.CharacterStyle):
    pass


class MemParagraphStyle(_MemStyle, host.ParagraphStyle):
    pass


class MemStory(_Removable, host.Story):
    """The text content and per character/paragraph formatting of a flow of text."""

    def __init__(self, document, contents=''):
        self.document = document
        self.container = None
        self.generation = 0
        self._text = ''
        self._para_props = [{}]
        self._char_props = []
        self.set_contents(contents)

    @property
    def contents(self) -> str:
        return self._text

    def set_contents(self, contents: str):
        """Replaces the text. All ranges obtained previously go stale."""
        self.generation += 1
        self._text = contents.replace('\r\n', '\n').replace('\r', '\n')
        self._para_props = [{} for _ in self.spans('paragraph')]
        self._char_props = [{} for _ in self._text]

    def spans(self, level):
        """Returns the (start, end) offsets of each unit of the given level."""
        if level == 'text':
            return [(0, len(self._text))]
        if level == 'paragraph':
            result = []
            start = 0
            for m in re.finditer('\n', self._text):
                result.append((start, m.start()))
                start = m.end()
            result.append((start, len(self._text)))
            return result
        if level == 'word':
            return [m.span() for m in re.finditer(r'\S+', self._text)]
        if level == 'character':
            return [(i, i + 1) for i, c in enumerate(self._text) if c != '\n']
        raise ValueError('unknown text level %r' % (level,))

    def paragraph_index(self, offset):
        return self._text.count('\n', 0, offset)

    def default(self, name):
        return self.document.text_defaults()[name]

    def paragraph_value(self, index, name):
        start, end = self.spans('paragraph')[index]
        if name in PARAGRAPH_LEVEL_PROPERTIES or start == end:
            return self._para_props[index].get(name, self.default(name))
        return self.char_value(start, name)

    def char_value(self, offset, name):
        para = self._para_props[self.paragraph_index(offset)]
        return self._char_props[offset].get(name, para.get(name, self.default(name)))

    def set_paragraph_value(self, index, name, value):
        self._para_props[index][name] = value
        if name not in PARAGRAPH_LEVEL_PROPERTIES:
            start, end = self.spans('paragraph')[index]
            for offset in range(start, end):
                self._char_props[offset][name] = value

    def set_char_value(self, offset, name, value):
        if name in PARAGRAPH_LEVEL_PROPERTIES:
            self._para_props[self.paragraph_index(offset)][name] = value
        else:
            self._char_props[offset][name] = value

    def paragraph_height(self, index):
        leading = self.paragraph_value(index, host.LEADING)
        if leading == Leading.AUTO:
            return self.paragraph_value(index, host.POINT_SIZE) * AUTO_LEADING_FACTOR
        return leading

    def ranges(self, level, frame=None):
        result = []
        for i, (start, end) in enumerate(self.spans(level)):
            if frame is not None and not frame.shows(start):
                continue
            result.append(MemTextRange(self, level, i, frame))
        return result

    def paragraphs(self) -> list['MemTextRange']:
        return self.ranges('paragraph')

    def characters(self) -> list['MemTextRange']:
        return self.ranges('character')

    def words(self) -> list['MemTextRange']:
        return self.ranges('word')

    def create_outlines(self):
        return outline_range(self, self)

    def __repr__(self):
        return 'MemStory(%r)' % (self._text[:20],)


class MemTextRange(host.TextRange):
    """A live reference to a paragraph, word, character or whole text of a story.

    Ranges handed out through a frame are only valid while their start is visible
    in that frame.
    """

    def __init__(self, story, level, index, frame=None):
        self.story = story
        self.level = level
        self.index = index
        self.frame = frame
        self.generation = story.generation

    def is_valid(self) -> bool:
        if not self.story.is_valid() or self.generation != self.story.generation:
            return False
        spans = self.story.spans(self.level)
        if self.index >= len(spans):
            return False
        if self.frame is not None:
            return self.frame.is_valid() and self.frame.shows(spans[self.index][0])
        return True

    def _span(self):
        if not self.is_valid():
            raise StaleReference('%r is no longer a valid text reference' % (self,))
        return self.story.spans(self.level)[self.index]

    @property
    def contents(self) -> str:
        start, end = self._span()
        return self.story.contents[start:end]

    def get_property(self, name: str):
        if name not in host.TEXT_PROPERTIES:
            raise HostRejection('%r is not a text property' % (name,))
        start, _ = self._span()
        if self.level == 'paragraph':
            return self.story.paragraph_value(self.index, name)
        if self.level == 'text' or start == len(self.story.contents):
            return self.story.paragraph_value(self.story.paragraph_index(start), name)
        return self.story.char_value(start, name)

    def set_property(self, name: str, value):
        start, end = self._span()
        check_text_property(self.story.document, name, value)
        if self.level == 'paragraph':
            self.story.set_paragraph_value(self.index, name, value)
            return
        first = self.story.paragraph_index(start)
        last = self.story.paragraph_index(end)
        for p in range(first, last + 1):
            pstart, pend = self.story.spans('paragraph')[p]
            if pstart >= start and pend <= end:
                self.story.set_paragraph_value(p, name, value)
        for offset in range(start, end):
            if self.story.contents[offset] != '\n':
                self.story.set_char_value(offset, name, value)
        if start == end:
            self.story.set_paragraph_value(first, name, value)

    def _contained(self, level):
        start, end = self._span()
        result = []
        for i, (s, e) in enumerate(self.story.spans(level)):
            if level == 'character':
                inside = start <= s and e <= end
            else:
                inside = s <= end and e >= start
            if not inside or (self.frame is not None and not self.frame.shows(s)):
                continue
            result.append(MemTextRange(self.story, level, i, self.frame))
        return result

    def paragraphs(self) -> list['MemTextRange']:
        if self.level == 'paragraph':
            return [self]
        return self._contained('paragraph')

    def characters(self) -> list['MemTextRange']:
        if self.level == 'character':
            return [self]
        return self._contained('character')

    def create_outlines(self):
        return outline_range(self.story, self)

    def __repr__(self):
        return 'MemTextRange(%s %d of %r)' % (self.level, self.index, self.story)


class MemPageItem(_Removable):
    """Anything placed on a page."""

    def __init__(self, page, layer, bounds=(0, 0, 0, 0)):
        self.page = page
        self.layer = layer
        self._bounds = tuple(float(b) for b in bounds)

    @property
    def geometric_bounds(self):
        return self._bounds

    @geometric_bounds.setter
    def geometric_bounds(self, bounds):
        if len(bounds) != 4 or not all(is_number(b) for b in bounds):
            raise HostRejection('bounds must be 4 numbers (top, left, bottom, right)')
        self._bounds = tuple(float(b) for b in bounds)

    def remove(self):
        super().remove()
        if self.page is not None and self in self.page.items:
            self.page.items.remove(self)


class MemTextFrame(MemPageItem, host.TextFrame):

    def __init__(self, page, layer, story, bounds=(0, 0, 0, 0)):
        super().__init__(page, layer, bounds)
        self.story = story
        story.container = self
        self.vertical_justification = VerticalJustification.TOP_ALIGN

    @property
    def contents(self) -> str:
        return self.story.contents

    def set_contents(self, contents: str):
        self.story.set_contents(contents)

    def set_vertical_justification(self, y_align):
        if y_align not in VerticalJustification:
            raise HostRejection('%r is not a VerticalJustification value' % (y_align,))
        self.vertical_justification = y_align

    def set_content_type(self, content_type):
        if content_type != ContentType.TEXT_TYPE:
            raise HostRejection('a text frame can only hold text')

    def elements(self):
        return [self]

    def shows(self, offset):
        """True if the paragraph containing offset fits inside the frame."""
        top, _, bottom, _ = self._bounds
        height = bottom - top
        index = self.story.paragraph_index(offset)
        used = sum(self.story.paragraph_height(i) for i in range(index + 1))
        return used <= height + 1e-9

    def paragraphs(self) -> list[MemTextRange]:
        return self.story.ranges('paragraph', self)

    def characters(self) -> list[MemTextRange]:
        return self.story.ranges('character', self)

    def words(self) -> list[MemTextRange]:
        return self.story.ranges('word', self)

    def overflows(self) -> bool:
        return len(self.paragraphs()) < len(self.story.spans('paragraph'))

    def transform(self, space, anchor, matrix):
        if space != CoordinateSpace.PASTEBOARD_COORDINATES:
            raise HostRejection('unsupported coordinate space %r' % (space,))
        top, left, bottom, right = self._bounds
        if anchor == AnchorPoint.TOP_LEFT_ANCHOR:
            ax, ay = left, top
        elif anchor == AnchorPoint.CENTER_ANCHOR:
            ax, ay = (left + right) / 2, (top + bottom) / 2
        else:
            raise HostRejection('unsupported anchor %r' % (anchor,))
        full = l.translate([ax, ay, 0]) * matrix * l.translate([-ax, -ay, 0])
        corners = []
        for x, y in ((left, top), (right, top), (right, bottom), (left, bottom)):
            v = full * l.GVector([x, y, 0])
            corners.append((v.x, v.y))
        (min_x, min_y), (max_x, max_y) = extentsof(np.array(corners))
        self._bounds = (float(min_y), float(min_x), float(max_y), float(max_x))

    def create_outlines(self):
        outlines = outline_text(self.story, self.paragraphs(), self._bounds)
        self.remove()
        return outlines

    def remove(self):
        super().remove()
        self.story.remove()

    def __repr__(self):
        return 'MemTextFrame(%r, bounds=%r)' % (self.story.contents[:20], self._bounds)


class MemTextPath(_Removable, host.TextPath):
    """Text running along a shape or line."""

    def __init__(self, owner, story):
        self.owner = owner
        self.story = story

    def is_valid(self) -> bool:
        return super().is_valid() and self.owner.is_valid()

    @property
    def contents(self) -> str:
        return self.story.contents

    def set_contents(self, contents: str):
        self.story.set_contents(contents)

    def texts(self) -> list[MemTextRange]:
        return self.story.ranges('text')

    def paragraphs(self) -> list[MemTextRange]:
        return self.story.paragraphs()

    def characters(self) -> list[MemTextRange]:
        return self.story.characters()

    def create_outlines(self):
        outlines = outline_glyphs(self.owner, self.characters())
        self.remove()
        return outlines


class MemShape(MemPageItem, host.Shape):
    """A rectangle, oval or polygon."""

    def __init__(self, page, layer, bounds=(0, 0, 0, 0), shape_type='rectangle'):
        super().__init__(page, layer, bounds)
        self.shape_type = shape_type
        self.content_type = ContentType.UNASSIGNED
        self._text_paths = []
        self._converted = None

    def set_content_type(self, content_type):
        self._check_valid()
        if content_type not in ContentType:
            raise HostRejection('%r is not a ContentType value' % (content_type,))
        self.content_type = content_type
        if content_type == ContentType.TEXT_TYPE and self._converted is None:
            story = self.page.document.add_story()
            frame = MemTextFrame(self.page, self.layer, story, self._bounds)
            self.page.items[self.page.items.index(self)] = frame
            self._converted = frame
            log.debug('Converted %s to %r', self.shape_type, frame)

    def elements(self):
        if self._converted is not None:
            return [self._converted]
        return [self]

    def text_paths(self) -> list[MemTextPath]:
        return [p for p in self._text_paths if p.is_valid()]

    def add_text_path(self) -> MemTextPath:
        self._check_valid()
        story = self.page.document.add_story()
        story.container = self
        path = MemTextPath(self, story)
        self._text_paths.append(path)
        return path

    def __repr__(self):
        return 'MemShape(%s, bounds=%r)' % (self.shape_type, self._bounds)


class MemPolygon(MemShape):
    KIND = TargetKind.POLYGON

    def __init__(self, page, layer, bounds=(0, 0, 0, 0), source_text=''):
        super().__init__(page, layer, bounds, 'polygon')
        self.source_text = source_text


class MemGraphicLine(MemShape, host.GraphicLine):

    def __init__(self, page, layer, start, end):
        (x1, y1), (x2, y2) = start, end
        super().__init__(page, layer, (min(y1, y2), min(x1, x2), max(y1, y2), max(x1, x2)),
                         'line')
        self.start = start
        self.end = end


class MemGroup(_Removable, host.Group):

    def __init__(self, page, items):
        self.page = page
        self.items = list(items)

    def ungroup(self):
        self.remove()
        return list(self.items)


def _check_fill(ranges):
    for r in ranges:
        if r.get_property(host.FILL_COLOR) == 'None':
            raise HostRejection('text needs a fill color to be outlined')


def outline_range(story, text):
    """Outlines a story or range the way its container lays it out."""
    container = story.container
    if container is not None and container.kind != TargetKind.TEXT_FRAME:
        return outline_glyphs(container, text.characters())
    bounds = container.geometric_bounds if container is not None else (0, 0, 0, 0)
    if getattr(text, 'level', 'text') in ('word', 'character'):
        return outline_text(story, [text], bounds)
    return outline_text(story, text.paragraphs(), bounds)


def outline_glyphs(owner, characters):
    """One polygon per glyph of text running along owner."""
    _check_fill(characters)
    outlines = [MemPolygon(owner.page, owner.layer, owner.geometric_bounds, source_text=c.contents)
                for c in characters if not c.contents.isspace()]
    owner.page.items.extend(outlines)
    return outlines


def outline_text(story, paragraphs, bounds):
    """One compound polygon per line, grouped when there is more than one line."""
    _check_fill(paragraphs)
    container = story.container
    page = container.page if container is not None else None
    layer = container.layer if container is not None else None
    polygons = [MemPolygon(page, layer, bounds, source_text=p.contents)
                for p in paragraphs if p.contents.strip()]
    if page is not None:
        page.items.extend(polygons)
    log.debug('Outlined %d line(s) of %r', len(polygons), story)
    if len(polygons) > 1:
        return [MemGroup(page, polygons)]
    return polygons


class MemPage(_Removable, host.Container):
    KIND = TargetKind.PAGE

    def __init__(self, document, spread, name):
        self.document = document
        self.spread = spread
        self.name = name
        self.items = []

    def text_frames(self) -> list[MemTextFrame]:
        return [i for i in self.items if i.kind == TargetKind.TEXT_FRAME and i.is_valid()]

    def __repr__(self):
        return 'MemPage(%r)' % (self.name,)


class MemSpread(_Removable, host.Container):
    KIND = TargetKind.SPREAD

    def __init__(self, document):
        self.document = document
        self.pages = []

    def text_frames(self) -> list[MemTextFrame]:
        return [f for page in self.pages for f in page.text_frames()]


class MemLayer(_Removable, host.Container):
    KIND = TargetKind.LAYER

    def __init__(self, document, name):
        self.document = document
        self.name = name

    def text_frames(self) -> list[MemTextFrame]:
        return [f for f in self.document.text_frames() if f.layer is self]

    def __repr__(self):
        return 'MemLayer(%r)' % (self.name,)


class MemDocument(_Removable, host.Document):

    def __init__(self, default_font, page_count=1):
        self.spreads = []
        self.layers = [MemLayer(self, 'Layer 1')]
        self.stories = []
        self.character_styles = [MemCharacterStyle(self, '[None]')]
        self.paragraph_styles = [
            MemParagraphStyle(self, '[No Paragraph Style]'),
            MemParagraphStyle(self, '[Basic Paragraph]'),
        ]
        self._defaults = {
            host.APPLIED_FONT: default_font,
            host.POINT_SIZE: 12.0,
            host.FILL_COLOR: 'Black',
            host.JUSTIFICATION: Justification.LEFT_ALIGN,
            host.LEADING: Leading.AUTO,
            host.KERNING_VALUE: 0.0,
            host.TRACKING: 0.0,
            host.APPLIED_CHARACTER_STYLE: self.character_styles[0],
            host.APPLIED_PARAGRAPH_STYLE: self.paragraph_styles[1],
        }
        for _ in range(page_count):
            self.add_page()

    @property
    def pages(self) -> list[MemPage]:
        return [p for s in self.spreads for p in s.pages]

    def add_page(self) -> MemPage:
        # The first spread holds a single right hand page, the rest hold pairs.
        if len(self.spreads) < 2 or len(self.spreads[-1].pages) == 2:
            self.spreads.append(MemSpread(self))
        spread = self.spreads[-1]
        page = MemPage(self, spread, str(len(self.pages) + 1))
        spread.pages.append(page)
        return page

    def add_layer(self, name) -> MemLayer:
        layer = MemLayer(self, name)
        self.layers.append(layer)
        return layer

    def add_story(self, contents='') -> MemStory:
        story = MemStory(self, contents)
        self.stories.append(story)
        return story

    def text_frames(self) -> list[MemTextFrame]:
        return [f for s in self.spreads for f in s.text_frames()]

    def text_defaults(self) -> dict:
        return dict(self._defaults)

    def find_character_style(self, name: str) -> MemCharacterStyle | None:
        return _find_by_name(self.character_styles, name)

    def add_character_style(self, name: str) -> MemCharacterStyle:
        return _add_style(self.character_styles, MemCharacterStyle(self, name))

    def find_paragraph_style(self, name: str) -> MemParagraphStyle | None:
        return _find_by_name(self.paragraph_styles, name)

    def add_paragraph_style(self, name: str) -> MemParagraphStyle:
        return _add_style(self.paragraph_styles, MemParagraphStyle(self, name))


def _find_by_name(styles, name):
    for style in styles:
        if style.is_valid() and style.name == name:
            return style
    return None


def _add_style(styles, style):
    if _find_by_name(styles, style.name) is not None:
        raise HostRejection('a style named %r already exists' % (style.name,))
    styles.append(style)
    return style


@datatree
class MemHost(host.Host):
    """An application with one active document."""

    fonts: tuple = DEFAULT_FONTS
    default_font: tuple = ('Minion Pro', 'Regular')
    page_count: int = 1
    document: MemDocument = dtfield(default=None, init=False)
    page: MemPage = dtfield(default=None, init=False)
    layer: MemLayer = dtfield(default=None, init=False)

    def __post_init__(self):
        self.document = MemDocument(self.find_font(*self.default_font), self.page_count)
        self.page = self.document.pages[0]
        self.layer = self.document.layers[0]

    def active_document(self) -> MemDocument:
        return self.document

    def current_page(self) -> MemPage:
        return self.page

    def current_layer(self) -> MemLayer:
        return self.layer

    def find_font(self, family: str, style: str) -> MemFont:
        return MemFont(family, style, (family, style) in self.fonts)

    def add_text_frame(self, page, layer) -> MemTextFrame:
        frame = MemTextFrame(page, layer, self.document.add_story())
        page.items.append(frame)
        log.debug('Added text frame on page %s layer %s', page.name, layer.name)
        return frame

    def add_shape(self, bounds, shape_type='rectangle') -> MemShape:
        if shape_type == 'polygon':
            shape = MemPolygon(self.page, self.layer, bounds)
        else:
            shape = MemShape(self.page, self.layer, bounds, shape_type)
        self.page.items.append(shape)
        return shape

    def add_line(self, start, end) -> MemGraphicLine:
        line = MemGraphicLine(self.page, self.layer, start, end)
        self.page.items.append(line)
        return line
