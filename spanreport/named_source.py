"""Source code with a name (typically a file name) attached."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from spanreport.protocol import SourceCode, SourceSpan, SpanContents
from spanreport.sources import read_span


@dataclass(frozen=True)
class NamedSource(SourceCode):
    """Wraps any readable source and gives the contents read from it a name."""

    name: str
    source: Any
    language: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            object.__setattr__(self, "name", str(self.name))

    def __repr__(self) -> str:
        return f"NamedSource(name={self.name!r}, source='<redacted>', language={self.language!r})"

    def with_language(self, language: str) -> NamedSource:
        """Return a copy that tags its contents with ``language``."""
        return replace(self, language=str(language))

    def read_span(
        self, span: SourceSpan, context_lines_before: int = 0, context_lines_after: int = 0
    ) -> SpanContents:
        """Read from the wrapped source and attach this source's name and language."""
        inner = read_span(self.source, span, context_lines_before, context_lines_after)
        return SpanContents(
            data=inner.data,
            span=inner.span,
            line=inner.line,
            column=inner.column,
            line_count=inner.line_count,
            name=self.name,
            language=self.language,
        )