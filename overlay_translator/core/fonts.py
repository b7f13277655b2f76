"""
Font lookup for overlay text - maps CSS-style families to TrueType files.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)

FAMILY_CANDIDATES: Dict[str, List[str]] = {
    "sans-serif": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
        "/Library/Fonts/Arial.ttf",
        r"C:\Windows\Fonts\arial.ttf",
    ],
    "serif": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf",
        "/Library/Fonts/Times New Roman.ttf",
        r"C:\Windows\Fonts\times.ttf",
    ],
    "monospace": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        r"C:\Windows\Fonts\cour.ttf",
    ],
}


class FontProvider:
    """Resolves and caches fonts; an explicit ``font_path`` wins over system lookup."""

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path
        self._paths: Dict[str, Optional[str]] = {}
        self._fonts: Dict[Tuple[str, float], ImageFont.ImageFont] = {}

    def _resolve_path(self, family: str) -> Optional[str]:
        if family in self._paths:
            return self._paths[family]

        candidates = list(FAMILY_CANDIDATES.get(family, FAMILY_CANDIDATES["sans-serif"]))
        if self.font_path:
            candidates.insert(0, self.font_path)

        path = next((p for p in candidates if Path(p).exists()), None)
        if path:
            logger.info(f"Font for {family}: {path}")
        else:
            logger.warning(f"No TrueType font found for {family}, using Pillow default")
        self._paths[family] = path
        return path

    def get_font(self, family: str, size: float):
        size = max(size, 1.0)
        key = (family, round(size, 2))
        font = self._fonts.get(key)
        if font is None:
            path = self._resolve_path(family)
            if path:
                font = ImageFont.truetype(path, size)
            else:
                font = ImageFont.load_default(size)
            self._fonts[key] = font
        return font

    def measure(self, text: str, family: str, size: float) -> float:
        """Advance width of ``text`` in pixels."""
        if size <= 0:
            return 0.0
        return float(self.get_font(family, size).getlength(text))
