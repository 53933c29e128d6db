"""Parse game lists written by the model.

The prompt asks for one game per line. Lines may carry an inline
annotation, and standalone annotations may span several lines:

    Portal 2 <COMMENT>co-op puzzles</COMMENT>
    Celeste
    <COMMENT>Both have great
    level design</COMMENT>

scan_response() classifies every line; parse_response() keeps the records
that become results (entries and closed annotations).
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Union

COMMENT_OPEN = '<COMMENT>'
COMMENT_CLOSE = '</COMMENT>'

# Non-greedy so each span on a line is matched separately
COMMENT_SPAN = re.compile(re.escape(COMMENT_OPEN) + r'(.*?)' + re.escape(COMMENT_CLOSE))


@dataclass(frozen=True)
class PlainEntry:
    name: str


@dataclass(frozen=True)
class AnnotatedEntry:
    name: str
    comment: str


@dataclass(frozen=True)
class CommentBlockOpen:
    text: str


@dataclass(frozen=True)
class CommentBlockContinuation:
    text: str


@dataclass(frozen=True)
class CommentBlockClose:
    """One line of a finished annotation. Becomes an annotation-only result."""
    text: str


@dataclass(frozen=True)
class Blank:
    pass


ParsedLine = Union[
    PlainEntry,
    AnnotatedEntry,
    CommentBlockOpen,
    CommentBlockContinuation,
    CommentBlockClose,
    Blank,
]

# Records that survive parse_response()
ParsedRecord = Union[PlainEntry, AnnotatedEntry, CommentBlockClose]


def _split_entry(line: str) -> Union[PlainEntry, AnnotatedEntry, None]:
    """Separate a game name from its inline annotation.

    Every span is removed from the name but only the first span's text is
    kept as the comment.
    """
    name = COMMENT_SPAN.sub('', line).strip()
    if not name:
        return None
    match = COMMENT_SPAN.search(line)
    comment = match.group(1).strip() if match else ''
    if comment:
        return AnnotatedEntry(name, comment)
    return PlainEntry(name)


def _close_block(block_text: str) -> Iterator[CommentBlockClose]:
    for piece in block_text.split('\n'):
        piece = piece.strip()
        if piece:
            yield CommentBlockClose(piece)


def scan_response(text: str) -> Iterator[ParsedLine]:
    """Classify each line of a model response.

    A block left open at the end of the text is dropped without being
    emitted. Lines whose name is empty once annotations are stripped are
    dropped as noise.

    Args:
        text: Full response text

    Yields:
        ParsedLine records in input order
    """
    in_block = False
    block_text = ''

    for line in text.split('\n'):
        line = line.rstrip('\r')
        stripped = line.strip()

        if in_block:
            if COMMENT_CLOSE in line:
                prefix = line.split(COMMENT_CLOSE, 1)[0]
                block_text += '\n' + prefix
                in_block = False
                yield from _close_block(block_text)
                block_text = ''
            else:
                block_text += '\n' + line
                yield CommentBlockContinuation(line)
            continue

        if not stripped:
            yield Blank()
            continue

        if stripped.startswith(COMMENT_OPEN):
            if COMMENT_CLOSE not in stripped:
                in_block = True
                block_text = stripped[len(COMMENT_OPEN):]
                yield CommentBlockOpen(block_text)
            else:
                inner = stripped[len(COMMENT_OPEN):].split(COMMENT_CLOSE, 1)[0].strip()
                if inner:
                    yield CommentBlockClose(inner)
            continue

        entry = _split_entry(line)
        if entry is not None:
            yield entry


def parse_response(text: str) -> List[ParsedRecord]:
    """Parse a model response into entries and annotations, in order."""
    return [
        parsed for parsed in scan_response(text)
        if isinstance(parsed, (PlainEntry, AnnotatedEntry, CommentBlockClose))
    ]
