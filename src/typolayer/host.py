"""
Host capability interface.

The typography facade never lays out text itself. Everything it does is expressed
as calls against the abstract classes below, which a host binding implements
(see typolayer.memhost for the in-memory implementation).
"""

from abc import ABC, abstractmethod

from typolayer.constants import TargetKind


# Text property names shared between the facade and hosts.
APPLIED_FONT = 'applied_font'
POINT_SIZE = 'point_size'
FILL_COLOR = 'fill_color'
JUSTIFICATION = 'justification'
LEADING = 'leading'
KERNING_VALUE = 'kerning_value'
TRACKING = 'tracking'
APPLIED_CHARACTER_STYLE = 'applied_character_style'
APPLIED_PARAGRAPH_STYLE = 'applied_paragraph_style'

TEXT_PROPERTIES = (
    APPLIED_FONT,
    POINT_SIZE,
    FILL_COLOR,
    JUSTIFICATION,
    LEADING,
    KERNING_VALUE,
    TRACKING,
    APPLIED_CHARACTER_STYLE,
    APPLIED_PARAGRAPH_STYLE,
)


class HostObject(ABC):
    """A reference into the host's live object graph."""

    KIND = TargetKind.UNRESOLVABLE

    @property
    def kind(self):
        return self.KIND

    @abstractmethod
    def is_valid(self) -> bool:
        """False once the referenced object has been removed or invalidated."""


class Font(ABC):

    @property
    @abstractmethod
    def family(self) -> str:
        pass

    @property
    @abstractmethod
    def style_name(self) -> str:
        pass

    @property
    @abstractmethod
    def installed(self) -> bool:
        pass


class Style(HostObject):

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def set_properties(self, props: dict):
        """Assigns each property, raises HostRejection for unknown names or bad values."""


class CharacterStyle(Style):
    KIND = TargetKind.CHARACTER_STYLE


class ParagraphStyle(Style):
    KIND = TargetKind.PARAGRAPH_STYLE


class Outlinable(HostObject):

    def create_outlines(self) -> list[HostObject]:
        """Converts the text to outlines. Returns polygons and/or groups."""
        raise NotImplementedError("create_outlines is not implemented")


class TextRange(Outlinable):
    """A character, word, line or paragraph level range of text."""

    KIND = TargetKind.TEXT_RANGE

    @property
    @abstractmethod
    def contents(self) -> str:
        pass

    @abstractmethod
    def get_property(self, name: str):
        pass

    @abstractmethod
    def set_property(self, name: str, value):
        """Sets a text property, raises HostRejection if the host refuses it."""

    @abstractmethod
    def paragraphs(self) -> list['TextRange']:
        pass

    @abstractmethod
    def characters(self) -> list['TextRange']:
        pass


class TextHolder(Outlinable):
    """Stories, text frames and text paths."""

    @abstractmethod
    def paragraphs(self) -> list[TextRange]:
        pass

    @abstractmethod
    def characters(self) -> list[TextRange]:
        pass


class Story(TextHolder):
    KIND = TargetKind.STORY


class TextFrame(TextHolder):
    KIND = TargetKind.TEXT_FRAME

    @abstractmethod
    def set_contents(self, contents: str):
        pass

    @property
    @abstractmethod
    def geometric_bounds(self) -> tuple[float, float, float, float]:
        """(top, left, bottom, right)"""

    @geometric_bounds.setter
    @abstractmethod
    def geometric_bounds(self, bounds):
        pass

    @abstractmethod
    def set_vertical_justification(self, y_align):
        pass

    @abstractmethod
    def transform(self, space, anchor, matrix):
        """Transforms the frame by matrix about the given anchor point of its bounds."""


class TextPath(TextHolder):
    KIND = TargetKind.TEXT_PATH

    @abstractmethod
    def set_contents(self, contents: str):
        pass

    @abstractmethod
    def texts(self) -> list[TextRange]:
        pass


class Container(HostObject):
    """Documents, spreads, pages and layers."""

    @abstractmethod
    def text_frames(self) -> list[TextFrame]:
        pass


class Document(Container):
    KIND = TargetKind.DOCUMENT

    @abstractmethod
    def find_character_style(self, name: str) -> CharacterStyle | None:
        pass

    @abstractmethod
    def add_character_style(self, name: str) -> CharacterStyle:
        pass

    @abstractmethod
    def find_paragraph_style(self, name: str) -> ParagraphStyle | None:
        pass

    @abstractmethod
    def add_paragraph_style(self, name: str) -> ParagraphStyle:
        pass

    @abstractmethod
    def text_defaults(self) -> dict:
        """Default values keyed by the text property names."""


class Shape(HostObject):
    """Rectangles, ovals and polygons."""

    KIND = TargetKind.SHAPE

    @abstractmethod
    def set_content_type(self, content_type):
        pass

    @abstractmethod
    def elements(self) -> list[HostObject]:
        pass

    @abstractmethod
    def text_paths(self) -> list[TextPath]:
        pass

    @abstractmethod
    def add_text_path(self) -> TextPath:
        pass


class GraphicLine(Shape):
    KIND = TargetKind.GRAPHIC_LINE


class Group(HostObject):
    KIND = TargetKind.GROUP

    @abstractmethod
    def ungroup(self) -> list[HostObject]:
        pass


class Host(ABC):
    """The application: current document, page and layer plus font lookup."""

    @abstractmethod
    def active_document(self) -> Document:
        pass

    @abstractmethod
    def current_page(self) -> Container:
        pass

    @abstractmethod
    def current_layer(self) -> Container:
        pass

    @abstractmethod
    def add_text_frame(self, page: Container, layer: Container) -> TextFrame:
        pass

    @abstractmethod
    def find_font(self, family: str, style: str) -> Font:
        """Always returns a Font, check Font.installed for availability."""
