"""
Module: builder.layout.text

Purpose:
    Lay out StyledRuns as greedily word-wrapped lines.

Key Functions:
    - render_runs(): Draw runs from an origin within a maximum width
    - render_content(): normalize() + render_runs()
    - resolve_run_font(): Font for a run given the base font

Algorithm:
    1. Split each run into space-preserving tokens ("word" + trailing spaces)
    2. Measure each token under the run's font
    3. If the token's visible width overflows a non-empty line, wrap
    4. Draw at (x, y + script offset) and advance x
    A token wider than the whole line is placed alone; the next token wraps.

Dependencies:
    - core.models.rich_content: StyledRun, normalize
    - builder.layout.context: LayoutContext

Used By:
    - builder.layout.options: Option content
    - builder.layout.composer: Question text
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from quiz_toolkit.core.models.rich_content import RichContent, ScriptOffset, StyledRun, normalize

from .context import LayoutContext
from .models import FontState

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\S+\s*|\s+")


@dataclass(frozen=True)
class Point:
    """Layout position in millimetres (y is the text baseline)."""

    x: float
    y: float


def split_words(text: str) -> List[str]:
    """
    Split text into tokens that keep their trailing whitespace.

    Example:
        >>> split_words("E = mc")
        ['E ', '= ', 'mc']
    """
    return _TOKEN.findall(text)


def resolve_run_font(base: FontState, run: StyledRun, script_scale: float = 0.7) -> FontState:
    """
    Font a run is drawn with.

    Bold/italic add to the base weight/style; super/subscript runs shrink
    to ``base.size_pt * script_scale``.
    """
    font = base.styled(bold=run.bold or base.is_bold, italic=run.italic or base.is_italic)
    if run.script != ScriptOffset.NONE:
        font = font.sized(base.size_pt * script_scale)
    return font


def script_offset(run: StyledRun, offset: float) -> float:
    """Baseline shift: up for superscript, down for subscript."""
    if run.script == ScriptOffset.SUPER:
        return -offset
    if run.script == ScriptOffset.SUB:
        return offset
    return 0.0


def render_runs(
    ctx: LayoutContext,
    runs: Iterable[StyledRun],
    origin: Point,
    max_width: float,
    base_font: Optional[FontState] = None,
) -> float:
    """
    Draw runs as wrapped lines starting at origin.

    Args:
        ctx: Layout context to draw into
        runs: Styled runs in reading order
        origin: Left edge and first baseline
        max_width: Maximum line width in millimetres
        base_font: Font for unformatted text (default: context's current font)

    Returns:
        Baseline after the last line (last baseline + line_height), or
        origin.y unchanged when there are no runs

    Example:
        >>> y = render_runs(ctx, normalize(Html("x<sup>2</sup>")), Point(30, 50), 160)
        >>> y
        56.0
    """
    runs = list(runs)
    if not runs:
        return origin.y

    config = ctx.config
    base = base_font or ctx.font
    x = origin.x
    y = origin.y
    line_width = 0.0

    with ctx.state.use_font(base):
        for run in runs:
            font = resolve_run_font(base, run, config.script_scale)
            offset = script_offset(run, config.script_offset)

            with ctx.state.use_font(font):
                for token in split_words(run.text):
                    visible = token.rstrip()
                    width = ctx.measure(token, font)
                    visible_width = ctx.measure(visible, font) if visible != token else width

                    if line_width > 0 and line_width + visible_width > max_width:
                        y += config.line_height
                        x = origin.x
                        line_width = 0.0

                    if line_width == 0 and not visible:
                        continue

                    ctx.draw_text(x, y + offset, token, font, underline=run.underline)
                    x += width
                    line_width += width

    return y + config.line_height


def render_content(
    ctx: LayoutContext,
    content: Optional[RichContent],
    origin: Point,
    max_width: float,
    base_font: Optional[FontState] = None,
) -> float:
    """Normalise rich content and render it (see render_runs)."""
    return render_runs(ctx, normalize(content), origin, max_width, base_font)
