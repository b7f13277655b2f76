"""
Affine transform helpers for placing native text runs in device pixels.

Matrices are 6-tuples ``(a, b, c, d, e, f)`` standing for
``[[a, c, e], [b, d, f], [0, 0, 1]]``, the same layout PDF uses.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

Matrix = Tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
DEFAULT_ASCENT = 0.9
DEFAULT_DESCENT = 0.25


def multiply_transform(m1: Sequence[float], m2: Sequence[float]) -> Matrix:
    """Compose ``m1 . m2`` (apply ``m2`` first, then ``m1``)."""
    a1, b1, c1, d1, e1, f1 = m1
    a2, b2, c2, d2, e2, f2 = m2
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def font_size_from_transform(transform: Sequence[float], scale: float) -> float:
    """Device font size of a run: length of the transform's x axis times scale."""
    return math.sqrt(transform[0] * transform[0] + transform[1] * transform[1]) * scale


@dataclass(frozen=True)
class RunGeometry:
    """Placement of a text run in device pixels."""
    x: float
    y: float
    font_size: float
    baseline: float
    # ascent plus descent, the full vertical footprint of the run
    height: float


def run_geometry(
    viewport: Sequence[float],
    transform: Sequence[float],
    scale: float,
    ascent: Optional[float] = None,
    descent: Optional[float] = None,
) -> RunGeometry:
    """
    Place a text run on the rendered page.

    ``y`` is the top of the run: the baseline moved up by ``font_size * ascent``.
    A missing or zero ascent falls back to 0.9. ``descent`` is the distance
    below the baseline as a fraction of the font size (sign ignored) and
    defaults to 0.25.
    """
    m = multiply_transform(viewport, transform)
    font_size = font_size_from_transform(transform, scale)
    ascent = ascent or DEFAULT_ASCENT
    descent = abs(descent) if descent is not None else DEFAULT_DESCENT
    return RunGeometry(
        x=m[4],
        y=m[5] - font_size * ascent,
        font_size=font_size,
        baseline=m[5],
        height=font_size * (ascent + descent),
    )
