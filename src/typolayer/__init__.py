"""typolayer is a Processing style typography layer for desktop publishing hosts.

It places text (text()), writes and reads text properties on anything that holds
text (typo()), resolves and applies character and paragraph styles and converts
text to outlines. Layout, shaping and rendering are left to the host, reached
through the abstract interface in typolayer.host. typolayer.memhost provides an
in-memory host.
"""

from typolayer.constants import (
    CENTER,
    CORNER,
    CORNERS,
    LOREM,
    RADIUS,
    AnchorPoint,
    ContentType,
    CoordinateSpace,
    FontNotInstalledWarning,
    HostRejection,
    InvalidArgument,
    Justification,
    Leading,
    StaleReference,
    StaleReferenceWarning,
    StyleNotFound,
    TargetKind,
    TypoBaseException,
    VerticalJustification,
)
from typolayer.context import TypographyContext
from typolayer.typography import (
    TargetResolution,
    Typography,
    anchored_matrix,
    rect_bounds,
    resolve_target,
)
