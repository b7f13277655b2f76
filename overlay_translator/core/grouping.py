"""
Word grouping - merges OCR words into line / phrase groups.

A single left-to-right scan. Each word is compared with the last word added to
the open group (not with the group's first word), so results depend on OCR
output order and are reproducible for a given word list.
"""
import logging
from typing import Iterable, List, Sequence

from overlay_translator.core.models import BBox, Word

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 50
SAME_LINE_RATIO = 0.5
MAX_GAP_RATIO = 2.5


def _is_usable(word: Word, min_confidence: float) -> bool:
    return word.confidence >= min_confidence and bool(word.text.strip())


def group_words(
    words: Iterable[Word],
    min_confidence: float = MIN_CONFIDENCE,
) -> List[List[Word]]:
    """
    Cluster words into groups.

    Words below ``min_confidence`` or with blank text are dropped. A word joins
    the open group when its top edge is within half a line height of the last
    word's top edge and the horizontal gap is under 2.5 line heights.
    """
    groups: List[List[Word]] = []
    current: List[Word] = []

    for word in words:
        if not _is_usable(word, min_confidence):
            continue
        if not current:
            current.append(word)
            continue

        last = current[-1]
        vertical_gap = abs(word.bbox.y0 - last.bbox.y0)
        horizontal_gap = word.bbox.x0 - last.bbox.x1
        font_height = last.bbox.y1 - last.bbox.y0

        same_line = vertical_gap < font_height * SAME_LINE_RATIO
        close = horizontal_gap < font_height * MAX_GAP_RATIO
        if same_line and close:
            current.append(word)
        else:
            groups.append(current)
            current = [word]

    if current:
        groups.append(current)

    logger.debug(f"Grouped words into {len(groups)} groups")
    return groups


def group_text(group: Sequence[Word]) -> str:
    return " ".join(w.text for w in group)


def group_bbox(group: Sequence[Word]) -> BBox:
    """
    Union box of a group.

    Horizontal bounds come from the first and last word in scan order; vertical
    bounds span every word so ascenders and descenders are covered.
    """
    return BBox(
        x0=group[0].bbox.x0,
        y0=min(w.bbox.y0 for w in group),
        x1=group[-1].bbox.x1,
        y1=max(w.bbox.y1 for w in group),
    )
