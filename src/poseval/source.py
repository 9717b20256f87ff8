"""
Document positions and the text helpers the definition resolver relies on.

Positions follow the editor convention: zero-based line and character.
Offsets are zero-based character offsets into a piece of text.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple
import inspect
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """A zero-based (line, character) position in a document."""
    line: int
    character: int

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.character + 1}"


@dataclass(frozen=True)
class Location:
    """A position inside a specific document."""
    uri: str
    position: Position

    def __str__(self) -> str:
        return f"{self.uri}:{self.position}"


@dataclass(frozen=True)
class DocumentSpan:
    """A run of text taken from a document, plus where it starts."""
    uri: str
    start: Position
    text: str

    def position_at(self, offset: int) -> Position:
        """Map an offset into `text` to a position in the document."""
        offset = max(0, min(offset, len(self.text)))
        before = self.text[:offset]
        newlines = before.count("\n")
        if newlines == 0:
            return Position(self.start.line, self.start.character + offset)
        return Position(self.start.line + newlines, offset - (before.rfind("\n") + 1))

    def location_at(self, offset: int) -> Location:
        return Location(self.uri, self.position_at(offset))


def offset_at(text: str, position: Position) -> Optional[int]:
    """Map a position to an offset in `text`; None if it lies outside the text."""
    if position.line < 0 or position.character < 0:
        return None
    lines = text.split("\n")
    if position.line >= len(lines):
        return None
    line = lines[position.line]
    if position.character > len(line):
        return None
    return sum(len(prev) + 1 for prev in lines[:position.line]) + position.character


def position_at(text: str, offset: int) -> Position:
    """Map an offset in `text` to a zero-based position."""
    return DocumentSpan("", Position(0, 0), text).position_at(offset)


def _is_assignment(text: str, i: int) -> bool:
    """Is the '=' at text[i] an assignment rather than part of ==, !=, <= or >=?"""
    if i + 1 < len(text) and text[i + 1] == "=":
        return False
    if i > 0 and text[i - 1] in "=!<>":
        return False
    return True


def find_assignment_rhs(text: str, offset: int) -> Optional[Tuple[int, int]]:
    """
    Find the right-hand side of the assignment starting at a definition.

    Scans forward from `offset` for the first of = ; { } (. Only an
    assignment '=' found first counts; then the right-hand side runs to the
    terminating ';'. Comparison operators are skipped in both scans.

    Returns the (start, end) offsets of the trimmed right-hand side, end
    exclusive, or None if the definition is not an assignment.
    """
    i = offset
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in ";{}(":
            return None
        if ch == "=":
            if _is_assignment(text, i):
                break
            # step over the whole two-character operator
            i += 2 if i + 1 < n and text[i + 1] == "=" else 1
            continue
        i += 1
    else:
        return None

    start = i + 1
    end = text.find(";", start)
    if end < 0:
        return None

    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    if start == end:
        return None
    return start, end


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class TextDocumentReader:
    """
    Builds the `read_assignment_rhs` collaborator from a document loader.

    The loader maps a document URI to its full text (or None) and may be a
    plain function or a coroutine function.

    Usage:
        reader = TextDocumentReader(lambda uri: documents.get(uri))
        rhs = await reader(location)
    """

    def __init__(self, loader: Callable[[str], Any]):
        self.loader = loader

    async def __call__(self, location: Location) -> Optional[DocumentSpan]:
        text = await _maybe_await(self.loader(location.uri))
        if text is None:
            logger.debug("no text for document %s", location.uri)
            return None
        offset = offset_at(text, location.position)
        if offset is None:
            logger.debug("%s lies outside its document", location)
            return None
        rhs = find_assignment_rhs(text, offset)
        if rhs is None:
            return None
        start, end = rhs
        return DocumentSpan(location.uri, position_at(text, start), text[start:end])


class HostServices(ABC):
    """
    The editor services a host provides.

    Only the definition lookup is consumed by the resolver; the others
    describe what a hover integration needs from its host.
    """

    @abstractmethod
    def resolve_symbol_type(self, location: Location) -> Optional[str]:
        """Declared type name of the symbol at `location`, e.g. 'Pose2d'."""
        ...

    @abstractmethod
    def resolve_definition_location(self, location: Location) -> Optional[Location]:
        """Where the symbol at `location` is defined."""
        ...

    @abstractmethod
    def read_line(self, location: Location) -> str:
        """The full text of the line containing `location`."""
        ...

    @abstractmethod
    def extract_expression_span(self, location: Location) -> Optional[DocumentSpan]:
        """The expression text around `location`, if there is one."""
        ...
