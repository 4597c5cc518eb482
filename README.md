# spanreport

Building blocks for diagnostics: exceptions that carry a code, a severity,
help text, a URL and labels that point at byte spans in some source text,
plus a reader that pulls a span and its surrounding lines out of that text.

## Installing

```
pip install spanreport
```

## Modules

### `spanreport.protocol`

- `SourceOffset(offset)`: a byte offset. `SourceOffset.from_location(source, line, col)`
  turns a 1-based line/column pair into a byte offset (UTF-8 bytes). A location
  past the end gives the length of the source in bytes.
  `SourceOffset.from_current_location()` returns the caller's file name and the
  offset of the call in that file. `to_json()` / `from_json()` use a bare integer.
- `SourceSpan(offset, length=0)`: a byte range. `SourceSpan.of(value)` accepts a
  span, a `SourceOffset`, an `int`, an `(offset, length)` tuple or a `range`
  with step 1. `SourceSpan.from_inclusive(start, end)` covers both ends.
  `is_empty()`, `to_dict()` and `from_dict()` (`{"offset": ..., "length": ...}`).
- `LabeledSpan(label, span, primary=False)`, with constructors
  `LabeledSpan.at((0, 3), "here")`, `LabeledSpan.at_offset(4, "missing paren")`,
  `LabeledSpan.underline((12, 4))`, `LabeledSpan.with_span(...)` and
  `LabeledSpan.primary_with_span(...)`. `offset()`, `length()`, `is_empty()`,
  `to_dict()` (leaves out a `None` label) and `from_dict()`.
- `Severity`: `ADVICE`, `WARNING`, `ERROR`, ordered in that sequence.
  `to_json()` gives `"Advice"`, `"Warning"` or `"Error"`; `from_json()` parses them.
- `SpanContents`: the bytes read for a span, with `span`, `line`, `column`,
  `line_count`, and optional `name` and `language`; `with_language()` returns a copy.
- `SourceCode`: abstract base with `read_span(span, context_lines_before, context_lines_after)`.
- `Diagnostic`: an `Exception` whose hooks `code()`, `severity()`, `help()`,
  `url()`, `source_code()`, `labels()`, `related()` and `diagnostic_source()`
  all return `None` unless a subclass overrides them (or sets `_source_code`,
  `_related` or `_diagnostic_source`).
- `MessageDiagnostic(message)` and `WrappedDiagnostic(error)`, and
  `as_diagnostic(value)`, which turns a diagnostic, a string or any exception
  into a `Diagnostic`.
- `OutOfBoundsError`: raised when a span lies outside its source.

### `spanreport.sources`

`read_span(source, span, context_lines_before=0, context_lines_after=0)` reads a
span out of a `str` (as UTF-8), a bytes-like object or any `SourceCode`, with
the requested lines of context. `\n`, `\r` and `\r\n` all end a line. It
returns a `SpanContents` and raises `OutOfBoundsError` when the span runs past
the end of the input.

### `spanreport.named_source`

`NamedSource(name, source, language=None)` wraps any source `read_span`
accepts and stamps its name, and language if set, on every `SpanContents` it
returns. `with_language()` returns a copy; the repr hides the source text.

### `spanreport.runtime_diagnostic`

`RuntimeDiagnostic(message, *, code=None, severity=None, help=None, url=None, labels=None)`
is a diagnostic built from plain values. `with_code`, `with_severity`,
`with_help`, `with_url`, `with_label`, `with_labels`, `and_label` and
`and_labels` return new diagnostics. `to_dict()` leaves out `None` fields;
`from_dict()` accepts them missing or null.

## Example

```python
from spanreport.protocol import LabeledSpan, Severity
from spanreport.runtime_diagnostic import RuntimeDiagnostic
from spanreport.named_source import NamedSource

diag = (
    RuntimeDiagnostic("Typos in 'hello world'")
    .with_code("spell::typo")
    .with_severity(Severity.WARNING)
    .and_label(LabeledSpan.at_offset(3, "add 'l'"))
    .and_label(LabeledSpan.at_offset(6, "add 'r'"))
)
print(diag)            # Typos in 'hello world'
print(diag.to_dict())  # JSON-ready dictionary

source = NamedSource("greeting.txt", "helo wrld\n")
contents = source.read_span((0, 4), 0, 0)
print(contents.name, contents.line, contents.column)  # greeting.txt 0 0
```

## What it does not do

The package holds the data a report is made from; it does not render
reports. There is no terminal, narrated or JSON report text, no colour
handling, no chain of wrapped error contexts and no hook for uncaught
exceptions. `to_dict()` gives plain dictionaries that can be passed to
`json.dumps`.

## Running the tests

```
pip install -e ".[test]"
pytest
```