"""Reading spans, with surrounding context lines, out of text and byte buffers."""

from __future__ import annotations

from collections import deque
from typing import Any

from spanreport.protocol import OutOfBoundsError, SourceCode, SourceSpan, SpanContents

_CR = 0x0D
_LF = 0x0A


def _as_bytes(source: Any) -> bytes:
    if isinstance(source, str):
        return source.encode("utf-8")
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    raise TypeError(f"cannot read spans from {type(source).__name__}")


def _check_count(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int, not {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{what} must not be negative: {value}")
    return value


def _context_info(
    data: bytes, span: SourceSpan, context_lines_before: int, context_lines_after: int
) -> SpanContents:
    offset = 0
    line_count = 0
    start_line = 0
    start_column = 0
    before_line_starts: deque[int] = deque()
    current_line_start = 0
    end_lines = 0
    post_span = False
    post_span_got_newline = False
    span_last = span.offset + max(span.length - 1, 0)
    span_end_last = max(span.offset + span.length - 1, 0)

    skip_next = False
    for position, char in enumerate(data):
        if skip_next:
            skip_next = False
            continue
        if char in (_CR, _LF):
            line_count += 1
            if char == _CR and data[position + 1 : position + 2] == b"\n":
                skip_next = True
                offset += 1
            if offset < span.offset:
                # Still before the span: remember where this line started.
                start_column = 0
                before_line_starts.append(current_line_start)
                if len(before_line_starts) > context_lines_before:
                    start_line += 1
                    before_line_starts.popleft()
            elif offset >= span_last and post_span:
                # Past the span; count trailing context lines.
                start_column = 0
                if post_span_got_newline:
                    end_lines += 1
                else:
                    post_span_got_newline = True
                if end_lines >= context_lines_after:
                    offset += 1
                    break
            current_line_start = offset + 1
        elif offset < span.offset:
            start_column += 1

        if offset >= span_end_last:
            post_span = True
            if end_lines >= context_lines_after:
                offset += 1
                break

        offset += 1

    if offset < span_end_last:
        raise OutOfBoundsError()

    if before_line_starts:
        starting_offset = before_line_starts[0]
    elif context_lines_before == 0:
        starting_offset = span.offset
    else:
        starting_offset = 0
    if starting_offset > offset:
        raise OutOfBoundsError()

    return SpanContents(
        data=data[starting_offset:offset],
        span=SourceSpan(starting_offset, offset - starting_offset),
        line=start_line,
        column=start_column if context_lines_before == 0 else 0,
        line_count=line_count,
    )


def read_span(
    source: Any,
    span: Any,
    context_lines_before: int = 0,
    context_lines_after: int = 0,
) -> SpanContents:
    """Read ``span`` from ``source`` with the given lines of context around it.

    ``source`` may be a ``str`` (read as UTF-8), a bytes-like object, or any
    :class:`SourceCode`. ``span`` is anything :meth:`SourceSpan.of` accepts.
    Raises :class:`OutOfBoundsError` when the span lies past the end of the source.
    """
    span = SourceSpan.of(span)
    _check_count(context_lines_before, "context_lines_before")
    _check_count(context_lines_after, "context_lines_after")
    if isinstance(source, SourceCode):
        return source.read_span(span, context_lines_before, context_lines_after)
    return _context_info(_as_bytes(source), span, context_lines_before, context_lines_after)