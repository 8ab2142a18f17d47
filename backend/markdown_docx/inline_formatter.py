"""Split one line of markdown text into styled text runs.

Emphasis state is flat: one toggle each for bold, italic and inline code.
Every toggle flushes the text collected so far with the flags that were
active before the toggle. Unclosed markers stay active until the end of the
line; each call starts from a clean state.
"""
from __future__ import annotations

from .document_models import TextRun

BACKTICK = "`"
ASTERISK = "*"


class _RunBuilder:
    def __init__(self) -> None:
        self.runs: list[TextRun] = []
        self.buffer: list[str] = []
        self.bold = False
        self.italic = False
        self.code = False

    def flush(self) -> None:
        if not self.buffer:
            return
        self.runs.append(
            TextRun(
                text="".join(self.buffer),
                bold=self.bold,
                italic=self.italic,
                is_code=self.code,
            )
        )
        self.buffer = []


def format_inline(line: str) -> list[TextRun]:
    """Return the runs for ``line`` with markup delimiters removed."""

    builder = _RunBuilder()
    length = len(line)
    # the index just past the last bold pair; such asterisks do not block italics
    consumed_until = 0
    index = 0
    while index < length:
        char = line[index]

        if char == BACKTICK:
            builder.flush()
            builder.code = not builder.code
            index += 1
            continue

        if char == ASTERISK and index + 1 < length and line[index + 1] == ASTERISK:
            builder.flush()
            builder.bold = not builder.bold
            index += 2
            consumed_until = index
            continue

        if char == ASTERISK:
            previous_free = index == 0 or index == consumed_until or line[index - 1] != ASTERISK
            if previous_free:
                builder.flush()
                builder.italic = not builder.italic
                index += 1
                continue

        builder.buffer.append(char)
        index += 1

    builder.flush()
    return builder.runs


def plain_text(runs: list[TextRun] | tuple[TextRun, ...]) -> str:
    return "".join(run.text for run in runs)


__all__ = ["format_inline", "plain_text"]
