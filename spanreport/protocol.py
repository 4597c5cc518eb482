"""Core types for describing diagnostics and the source spans they point at."""

from __future__ import annotations

import enum
import inspect
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, ClassVar


class OutOfBoundsError(Exception):
    """Raised when a requested span lies outside the available source."""

    def __init__(self, message: str = "The given offset is outside the bounds of its Source") -> None:
        super().__init__(message)


class Severity(enum.IntEnum):
    """How serious a diagnostic is. Reporters treat a missing severity as ERROR."""

    ADVICE = 0
    WARNING = 1
    ERROR = 2

    def to_json(self) -> str:
        """Return the serialised name, e.g. ``"Warning"``."""
        return self.name.capitalize()

    @classmethod
    def from_json(cls, value: str) -> Severity:
        """Parse a serialised name such as ``"Advice"``."""
        for member in cls:
            if member.to_json() == value:
                return member
        raise ValueError(f"unknown severity: {value!r}")


def _check_size(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int, not {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{what} must not be negative: {value}")
    return value


@dataclass(frozen=True, order=True)
class SourceOffset:
    """A byte offset from the beginning of some source code."""

    offset: int

    def __post_init__(self) -> None:
        _check_size(self.offset, "offset")

    @classmethod
    def from_location(cls, source: str, loc_line: int, loc_col: int) -> SourceOffset:
        """Convert a 1-based line/column pair into a byte offset.

        Out-of-range locations yield the length of the source in bytes.
        """
        line = col = offset = 0
        for char in source:
            if line + 1 >= loc_line and col + 1 >= loc_col:
                break
            if char == "\n":
                col = 0
                line += 1
            else:
                col += 1
            offset += len(char.encode("utf-8"))
        return cls(offset)

    @classmethod
    def from_current_location(cls) -> tuple[str, SourceOffset]:
        """Return the caller's file name and the offset of the call within it.

        Raises ``OSError`` if the file cannot be read.
        """
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        if caller is None:
            raise RuntimeError("no calling frame available")
        try:
            info = inspect.getframeinfo(caller, context=0)
            filename = info.filename
            line = info.lineno
            positions = getattr(info, "positions", None)
            col_offset = positions.col_offset if positions is not None else None
        finally:
            del frame, caller
        column = (col_offset or 0) + 1
        text = Path(filename).read_text(encoding="utf-8")
        return filename, cls.from_location(text, line, column)

    def to_json(self) -> int:
        """Serialise as a bare integer."""
        return self.offset

    @classmethod
    def from_json(cls, value: int) -> SourceOffset:
        """Parse a bare integer offset."""
        return cls(value)


@dataclass(frozen=True, order=True)
class SourceSpan:
    """A byte range within some source code."""

    offset: int
    length: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.offset, SourceOffset):
            object.__setattr__(self, "offset", self.offset.offset)
        _check_size(self.offset, "offset")
        _check_size(self.length, "length")

    @classmethod
    def of(cls, value: Any) -> SourceSpan:
        """Build a span from a span, offset, ``(start, length)`` tuple or range."""
        match value:
            case SourceSpan():
                return value
            case SourceOffset(offset=offset):
                return cls(offset, 0)
            case bool():
                raise TypeError("cannot build a span from a bool")
            case int():
                return cls(value, 0)
            case (start, length):
                return cls(start, length)
            case range():
                if value.step != 1:
                    raise ValueError("only ranges with a step of 1 describe a span")
                return cls(value.start, len(value))
        raise TypeError(f"cannot build a span from {type(value).__name__}")

    @classmethod
    def from_inclusive(cls, start: int, end: int) -> SourceSpan:
        """Build a span covering ``start`` through ``end``, both included."""
        _check_size(start, "start")
        _check_size(end, "end")
        return cls(start, 0 if start > end else end - start + 1)

    def is_empty(self) -> bool:
        """True if the span has length zero."""
        return self.length == 0

    def to_dict(self) -> dict[str, int]:
        """Serialise as ``{"offset": ..., "length": ...}``."""
        return {"offset": self.offset, "length": self.length}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceSpan:
        """Parse the form produced by :meth:`to_dict`."""
        try:
            return cls(data["offset"], data["length"])
        except KeyError as exc:
            raise ValueError(f"span is missing field {exc.args[0]!r}") from None


@dataclass
class LabeledSpan:
    """A span with an optional label, possibly marked as the primary one."""

    label: str | None
    span: SourceSpan
    primary: bool = False

    def __post_init__(self) -> None:
        self.span = SourceSpan.of(self.span)

    @classmethod
    def with_span(cls, label: str | None, span: Any) -> LabeledSpan:
        """Make a labeled span from anything :meth:`SourceSpan.of` accepts."""
        return cls(label, SourceSpan.of(span))

    @classmethod
    def primary_with_span(cls, label: str | None, span: Any) -> LabeledSpan:
        """Make a primary labeled span."""
        return cls(label, SourceSpan.of(span), primary=True)

    @classmethod
    def at(cls, span: Any, label: str) -> LabeledSpan:
        """Label the given span with text."""
        return cls.with_span(label, span)

    @classmethod
    def at_offset(cls, offset: int, label: str) -> LabeledSpan:
        """Label a zero-length point at ``offset``."""
        return cls(label, SourceSpan(offset, 0))

    @classmethod
    def underline(cls, span: Any) -> LabeledSpan:
        """Underline a span without any label text."""
        return cls.with_span(None, span)

    def offset(self) -> int:
        """Starting byte offset."""
        return self.span.offset

    def length(self) -> int:
        """Number of bytes covered."""
        return self.span.length

    def is_empty(self) -> bool:
        """True if the underlying span is empty."""
        return self.span.is_empty()

    def to_dict(self) -> dict[str, Any]:
        """Serialise; the label is left out when it is None."""
        data: dict[str, Any] = {}
        if self.label is not None:
            data["label"] = self.label
        data["span"] = self.span.to_dict()
        data["primary"] = self.primary
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LabeledSpan:
        """Parse the form produced by :meth:`to_dict`; ``label`` may be absent or null."""
        try:
            span = SourceSpan.from_dict(data["span"])
            primary = data["primary"]
        except KeyError as exc:
            raise ValueError(f"labeled span is missing field {exc.args[0]!r}") from None
        if not isinstance(primary, bool):
            raise TypeError("primary must be a bool")
        return cls(data.get("label"), span, primary)


@dataclass(frozen=True)
class SpanContents:
    """Bytes read from a source for a span, with their position in it."""

    data: bytes
    span: SourceSpan
    line: int
    column: int
    line_count: int
    name: str | None = None
    language: str | None = field(default=None)

    def with_language(self, language: str) -> SpanContents:
        """Return a copy carrying a language name for syntax highlighting."""
        return replace(self, language=language)


class SourceCode(ABC):
    """Something spans can be read from."""

    @abstractmethod
    def read_span(
        self, span: SourceSpan, context_lines_before: int, context_lines_after: int
    ) -> SpanContents:
        """Read ``span`` plus the requested lines of context around it."""


class Diagnostic(Exception):
    """An error that carries extra metadata for reporting.

    Every accessor returns None by default; subclasses override what they have,
    either by overriding the method or by setting the matching underscored
    attribute (``_source_code``, ``_related``, ``_diagnostic_source``).
    """

    _source_code: ClassVar[Any] = None
    _related: ClassVar[tuple[Diagnostic, ...] | None] = None
    _diagnostic_source: ClassVar[Diagnostic | None] = None

    def code(self) -> str | None:
        """Unique code identifying this kind of diagnostic."""
        return None

    def severity(self) -> Severity | None:
        """How serious this is; None means ERROR."""
        return None

    def help(self) -> str | None:
        """Advice for fixing the problem."""
        return None

    def url(self) -> str | None:
        """Where to read more about this diagnostic."""
        return None

    def source_code(self) -> Any:
        """Source code the labels refer to."""
        return self._source_code

    def labels(self) -> Iterator[LabeledSpan] | None:
        """Labeled spans within :meth:`source_code`."""
        return None

    def related(self) -> Iterator[Diagnostic] | None:
        """Further diagnostics related to this one."""
        related = self._related
        if related is None:
            return None
        return iter(related)

    def diagnostic_source(self) -> Diagnostic | None:
        """The diagnostic that caused this one."""
        source = self._diagnostic_source
        if source is not None and not isinstance(source, Diagnostic):
            raise TypeError(f"diagnostic source must be a Diagnostic, not {type(source).__name__}")
        return source


class MessageDiagnostic(Diagnostic):
    """A diagnostic that is nothing but a message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return repr(self.message)


class WrappedDiagnostic(Diagnostic):
    """Presents an arbitrary exception as a diagnostic without metadata."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(error)
        self.error = error
        self.__cause__ = error.__cause__

    def __str__(self) -> str:
        return str(self.error)

    def __repr__(self) -> str:
        return repr(self.error)


def as_diagnostic(value: Any) -> Diagnostic:
    """Turn a diagnostic, a message or any exception into a diagnostic."""
    if isinstance(value, Diagnostic):
        return value
    if isinstance(value, str):
        return MessageDiagnostic(value)
    if isinstance(value, BaseException):
        return WrappedDiagnostic(value)
    raise TypeError(f"cannot make a diagnostic from {type(value).__name__}")