import logging

import typolayer as typo
from typolayer.memhost import MemHost

log = logging.getLogger(__name__)

POEM = "The Tyger\nTyger Tyger, burning bright,\nIn the forests of the night;"

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    t = typo.Typography(MemHost())

    title = t.paragraph_style("Title", {"point_size": 20, "justification": typo.Justification.CENTER_ALIGN})
    verse = t.paragraph_style("Verse", {"point_size": 11, "leading": 14})
    stress = t.character_style("Stress", {"tracking": 100})

    frame = t.text(POEM, 50, 50, 300, 200)
    t.apply_paragraph_style(frame, verse)
    t.apply_paragraph_style(frame.paragraphs()[0], title)
    t.apply_character_style(frame.words()[1], "Stress")

    for para in frame.paragraphs():
        style = t.paragraph_style(para)
        print(f"{style.name:>8}: {para.contents}")

    try:
        t.apply_character_style(frame, "Whisper")
    except typo.StyleNotFound as e:
        log.warning("%s", e)

    print(f"Stressed word style: {t.character_style(frame.words()[1]).name}")
    print(f"Stress properties: {stress.properties}")
