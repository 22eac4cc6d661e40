import sys
import logging

import typolayer as typo
from typolayer.memhost import MemHost

log = logging.getLogger(__name__)


def describe(t, item):
    for name in ('point_size', 'tracking', 'fill_color'):
        print(f"  {name}: {t.typo(item, name)}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if "--debug" in sys.argv else logging.INFO)

    host = MemHost(page_count=2)
    t = typo.Typography(host)

    # A heading in the top left corner.
    t.text_size(24)
    t.text_font("Helvetica", "Bold")
    heading = t.text("Typography", 36, 36, 400, 40)
    print(f"Heading bounds: {heading.geometric_bounds}")

    # Body copy centred on a point and turned a little.
    t.text_size(10)
    t.text_font("Minion Pro")
    t.rect_mode(typo.CENTER)
    t.rotate(-5)
    body = t.text(typo.LOREM, 300, 300, 400, 200)
    t.reset_matrix()
    print(f"Body bounds: {body.geometric_bounds}")

    # Text running along a line.
    line = host.add_line((36, 600), (500, 650))
    path = t.text("along the line", line)

    # Track everything on the page out and read it back.
    t.typo(host.page, "tracking", 50)
    print("Page:")
    describe(t, host.page)
    print("Path:")
    describe(t, path)

    log.info("Frames on page 1: %d", len(host.page.text_frames()))

    outlines = t.create_outlines(heading, lambda polygon, i: polygon.source_text)
    print(f"Outlined: {outlines}")
