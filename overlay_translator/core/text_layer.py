"""
Text layer - presentation handles bound to TextItems by position.

TextItems carry no reference to what displays them; the layer keeps a
``page_index -> item_index -> TextElement`` mapping instead, so live edits can
find the element for an item and the engine stays display-agnostic.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple


@dataclass
class TextElement:
    """One placed piece of overlay text."""
    text: str
    x: float
    y: float
    font_size: float
    font_family: str
    color: str
    background: str = "transparent"
    translated: bool = False
    # An opaque element covers at least this box, the original run's footprint
    cover_width: float = 0.0
    cover_height: float = 0.0

    @property
    def is_opaque(self) -> bool:
        return self.background != "transparent"


class TextLayer:
    def __init__(self):
        self._elements: Dict[int, Dict[int, TextElement]] = {}

    def bind(self, page_index: int, item_index: int, element: TextElement):
        self._elements.setdefault(page_index, {})[item_index] = element

    def get(self, page_index: int, item_index: int) -> Optional[TextElement]:
        return self._elements.get(page_index, {}).get(item_index)

    def page(self, page_index: int) -> Iterator[Tuple[int, TextElement]]:
        yield from sorted(self._elements.get(page_index, {}).items())

    def clear_page(self, page_index: int):
        self._elements.pop(page_index, None)

    def clear(self):
        self._elements.clear()

    def __len__(self) -> int:
        return sum(len(elements) for elements in self._elements.values())
