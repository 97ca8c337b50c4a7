"""
Module: rich_content

Purpose:
    Tagged-union representation of a formatted text fragment (Delta, Html or
    PlainText) and the single normalisation step that turns any of them into
    an ordered list of StyledRuns for the layout engine.

Key Functions:
    - normalize(): RichContent -> list[StyledRun]
    - plain_text_of(): Concatenate run text, ignoring formatting
    - extract_plain_text(): Independent plain-text extraction of RichContent
    - rich_content_from_fields(): Build RichContent from stored quiz fields

Key Classes:
    - StyledRun: Text sharing one formatting state
    - Delta / DeltaOp: Editor run list with inline attributes
    - Html: Inline HTML fragment
    - PlainText: Unformatted text

Dependencies:
    - dataclasses (std)
    - re (std)

Used By:
    - core.models.questions: Question content
    - builder.layout.text: Content rendering
    - builder.layout.options: Option rendering
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union

logger = logging.getLogger(__name__)


class MalformedRichContentError(ValueError):
    """Rich content payload could not be interpreted."""


class ScriptOffset(str, Enum):
    """Vertical placement of a run relative to the baseline."""
    NONE = "none"
    SUPER = "super"
    SUB = "sub"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StyledRun:
    """
    Maximal span of text sharing one formatting state (immutable).

    Attributes:
        text: Run text (never contains newlines)
        bold: Bold weight
        italic: Italic style
        underline: Underlined
        script: Superscript/subscript placement
    """

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    script: ScriptOffset = ScriptOffset.NONE

    def with_text(self, text: str) -> "StyledRun":
        """Copy of this run carrying different text."""
        return StyledRun(text, self.bold, self.italic, self.underline, self.script)


@dataclass(frozen=True)
class DeltaOp:
    """Single insert operation of a Delta."""

    insert: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    script: ScriptOffset = ScriptOffset.NONE


@dataclass(frozen=True)
class Delta:
    """
    Ordered list of text inserts with optional formatting attributes.

    Example:
        >>> delta = Delta.from_ops([
        ...     {"insert": "E = mc"},
        ...     {"insert": "2", "attributes": {"script": "super"}},
        ... ])
        >>> len(delta.ops)
        2
    """

    ops: tuple[DeltaOp, ...] = ()

    @classmethod
    def from_ops(cls, payload: Any) -> "Delta":
        """
        Build a Delta from editor JSON.

        Accepts either ``{"ops": [...]}`` or the bare op list. Embedded
        objects (non-string inserts) are skipped.

        Raises:
            MalformedRichContentError: If the payload is not an op list, an
                op has no ``insert`` key or its attributes are not an object.
        """
        if isinstance(payload, dict):
            payload = payload.get("ops")
        if not isinstance(payload, (list, tuple)):
            raise MalformedRichContentError(f"Delta ops must be a list, got {type(payload).__name__}")

        ops: list[DeltaOp] = []
        for i, raw in enumerate(payload):
            if not isinstance(raw, dict) or "insert" not in raw:
                raise MalformedRichContentError(f"Delta op {i} has no insert: {raw!r}")
            insert = raw["insert"]
            if not isinstance(insert, str):
                # Formula/image embeds carry no text for layout
                continue
            attributes = raw.get("attributes") or {}
            if not isinstance(attributes, dict):
                raise MalformedRichContentError(f"Delta op {i} attributes must be an object: {attributes!r}")
            ops.append(DeltaOp(
                insert=insert,
                bold=bool(attributes.get("bold")),
                italic=bool(attributes.get("italic")),
                underline=bool(attributes.get("underline")),
                script=_script_from_attribute(attributes.get("script")),
            ))
        return cls(ops=tuple(ops))


@dataclass(frozen=True)
class Html:
    """Inline HTML fragment (strong/em/u/sup/sub/p/br)."""

    markup: str


@dataclass(frozen=True)
class PlainText:
    """Unformatted text."""

    text: str


RichContent = Union[Delta, Html, PlainText]

EMPTY_CONTENT = PlainText("")


# ─────────────────────────────────────────────────────────────────────────────
# Normalisation
# ─────────────────────────────────────────────────────────────────────────────

_TAG = re.compile(r"<\s*(/?)\s*([a-zA-Z][a-zA-Z0-9]*)[^>]*>")

# &amp; must be decoded last so "&amp;lt;" stays "&lt;"
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
)

_FLAG_TAGS = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "u": "underline",
    "sup": "super",
    "sub": "sub",
}


def normalize(content: Optional[RichContent]) -> list[StyledRun]:
    """
    Convert any RichContent into an ordered list of StyledRuns.

    Deterministic and order-preserving. Each newline becomes a space (no
    paragraph model), the result is trimmed at both ends and empty runs are
    dropped.

    Args:
        content: Delta, Html or PlainText (None is treated as empty)

    Returns:
        List of StyledRuns whose concatenated text equals
        extract_plain_text(content)

    Example:
        >>> normalize(Html("<strong>Bold</strong> text"))
        [StyledRun(text='Bold', bold=True, ...), StyledRun(text=' text', ...)]
    """
    if content is None:
        return []
    if isinstance(content, Delta):
        runs = [
            StyledRun(
                text=_collapse_newlines(op.insert),
                bold=op.bold,
                italic=op.italic,
                underline=op.underline,
                script=op.script,
            )
            for op in content.ops
        ]
    elif isinstance(content, Html):
        runs = _html_runs(content.markup)
    elif isinstance(content, PlainText):
        runs = [StyledRun(text=_collapse_newlines(content.text))]
    else:
        raise TypeError(f"Unsupported rich content type: {type(content).__name__}")
    return _trim_runs(runs)


def plain_text_of(runs: Iterable[StyledRun]) -> str:
    """Concatenate run text, ignoring formatting."""
    return "".join(run.text for run in runs)


def extract_plain_text(content: Optional[RichContent]) -> str:
    """
    Plain-text extraction computed directly from the content.

    Mirrors the export tool's text stripping: tags removed, entities decoded,
    newlines replaced by spaces, trimmed.
    """
    if content is None:
        return ""
    if isinstance(content, Delta):
        return _collapse_newlines("".join(op.insert for op in content.ops)).strip()
    if isinstance(content, Html):
        text = _TAG.sub(lambda m: " " if _is_break(m) else "", content.markup)
        return _collapse_newlines(_decode_entities(text)).strip()
    if isinstance(content, PlainText):
        return _collapse_newlines(content.text).strip()
    raise TypeError(f"Unsupported rich content type: {type(content).__name__}")


def rich_content_from_fields(
    delta: Any = None,
    html: Optional[str] = None,
    text: Optional[str] = None,
) -> RichContent:
    """
    Pick the richest usable representation of stored content.

    Order: Delta → Html → PlainText. A malformed or empty Delta falls back to
    the next representation; missing everything yields empty PlainText.

    Args:
        delta: Editor Delta payload (dict with ``ops`` or op list)
        html: HTML markup
        text: Plain text

    Returns:
        RichContent instance
    """
    if delta:
        try:
            parsed = Delta.from_ops(delta)
        except MalformedRichContentError as e:
            logger.warning(f"Ignoring malformed Delta content: {e}")
        else:
            if extract_plain_text(parsed):
                return parsed
            logger.debug("Delta content is empty, falling back to HTML/text")
    if isinstance(html, str) and html.strip():
        return Html(html)
    return PlainText(text or "")


def _html_runs(markup: str) -> list[StyledRun]:
    """Tokenise inline HTML into runs, tracking open formatting tags."""
    depth = {"bold": 0, "italic": 0, "underline": 0, "super": 0, "sub": 0}
    runs: list[StyledRun] = []

    def emit(raw: str) -> None:
        text = _collapse_newlines(_decode_entities(raw))
        if not text:
            return
        if depth["super"]:
            script = ScriptOffset.SUPER
        elif depth["sub"]:
            script = ScriptOffset.SUB
        else:
            script = ScriptOffset.NONE
        runs.append(StyledRun(
            text=text,
            bold=depth["bold"] > 0,
            italic=depth["italic"] > 0,
            underline=depth["underline"] > 0,
            script=script,
        ))

    pos = 0
    for match in _TAG.finditer(markup):
        emit(markup[pos:match.start()])
        pos = match.end()

        flag = _FLAG_TAGS.get(match.group(2).lower())
        if flag is not None:
            closing = match.group(1) == "/"
            depth[flag] = max(0, depth[flag] + (-1 if closing else 1))
        elif _is_break(match):
            emit(" ")
    emit(markup[pos:])

    return _merge_adjacent(runs)


def _merge_adjacent(runs: list[StyledRun]) -> list[StyledRun]:
    """Join consecutive runs with identical formatting."""
    merged: list[StyledRun] = []
    for run in runs:
        if merged and merged[-1].with_text("") == run.with_text(""):
            merged[-1] = merged[-1].with_text(merged[-1].text + run.text)
        else:
            merged.append(run)
    return merged


def _trim_runs(runs: list[StyledRun]) -> list[StyledRun]:
    """Strip leading/trailing whitespace across the run list, drop empties."""
    runs = [run for run in runs if run.text]
    while runs and not runs[0].text.strip():
        runs.pop(0)
    while runs and not runs[-1].text.strip():
        runs.pop()
    if not runs:
        return []
    runs[0] = runs[0].with_text(runs[0].text.lstrip())
    runs[-1] = runs[-1].with_text(runs[-1].text.rstrip())
    return runs


def _is_break(match: re.Match) -> bool:
    """<br> in any form, or a closing </p>."""
    name = match.group(2).lower()
    return name == "br" or (name == "p" and match.group(1) == "/")


def _collapse_newlines(text: str) -> str:
    return text.replace("\n", " ")


def _decode_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _script_from_attribute(value: Any) -> ScriptOffset:
    if value == "super":
        return ScriptOffset.SUPER
    if value == "sub":
        return ScriptOffset.SUB
    return ScriptOffset.NONE
