from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

DEFAULT_MARKER = "///"
LINE_BREAK = "\n"


@dataclass(frozen=True)
class SourceLine:
    number: int
    start: int
    text: str
    is_doc: bool

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class DocBlock:
    """Maximal run of consecutive documentation-comment lines.

    ``start`` and ``end`` are offsets into the scanned text (``end`` is
    exclusive and excludes the final line break); ``text`` is the raw slice
    between them, leading whitespace and markers included.
    """

    start: int
    end: int
    start_line: int
    end_line: int
    text: str

    def contains(self, needle: str) -> bool:
        return needle in self.text


def is_doc_line(line: str, *, marker: str = DEFAULT_MARKER) -> bool:
    return line.lstrip().startswith(marker)


def classify_lines(source: str, *, marker: str = DEFAULT_MARKER) -> Iterator[SourceLine]:
    offset = 0
    for index, text in enumerate(source.split(LINE_BREAK)):
        yield SourceLine(
            number=index + 1,
            start=offset,
            text=text,
            is_doc=is_doc_line(text, marker=marker),
        )
        offset += len(text) + len(LINE_BREAK)


def segment_blocks(source: str, *, marker: str = DEFAULT_MARKER) -> tuple[DocBlock, ...]:
    blocks: list[DocBlock] = []
    run: list[SourceLine] = []
    for line in classify_lines(source, marker=marker):
        if line.is_doc:
            run.append(line)
            continue
        if run:
            blocks.append(_block_from_run(source, run))
            run = []
    if run:
        blocks.append(_block_from_run(source, run))
    return tuple(blocks)


def _block_from_run(source: str, run: list[SourceLine]) -> DocBlock:
    first, last = run[0], run[-1]
    return DocBlock(
        start=first.start,
        end=last.end,
        start_line=first.number,
        end_line=last.number,
        text=source[first.start : last.end],
    )


__all__ = [
    "DEFAULT_MARKER",
    "DocBlock",
    "SourceLine",
    "classify_lines",
    "is_doc_line",
    "segment_blocks",
]
