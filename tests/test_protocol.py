from pathlib import Path

import pytest

from spanreport.protocol import (
    Diagnostic,
    LabeledSpan,
    MessageDiagnostic,
    OutOfBoundsError,
    Severity,
    SourceCode,
    SourceOffset,
    SourceSpan,
    SpanContents,
    WrappedDiagnostic,
    as_diagnostic,
)

SOURCE = "f\n\noo\r\nbar"


@pytest.mark.parametrize(
    ("line", "col", "expected"),
    [
        (1, 1, 0),
        (1, 2, 1),
        (2, 1, 2),
        (3, 1, 3),
        (3, 2, 4),
        (3, 3, 5),
        (3, 4, 6),
        (4, 1, 7),
        (4, 2, 8),
        (4, 3, 9),
        (4, 4, 10),
    ],
)
def test_source_offset_from_location(line, col, expected):
    assert SourceOffset.from_location(SOURCE, line, col).offset == expected


def test_source_offset_from_location_out_of_range():
    assert SourceOffset.from_location(SOURCE, 5, 1).offset == len(SOURCE.encode())


def test_source_offset_from_location_counts_utf8_bytes():
    assert SourceOffset.from_location("é\nx", 2, 1).offset == 3


def test_source_offset_from_current_location():
    name, offset = SourceOffset.from_current_location()
    assert Path(name).resolve() == Path(__file__).resolve()
    data = Path(name).read_bytes()
    start = data.rfind(b"\n", 0, offset.offset) + 1
    end = data.find(b"\n", offset.offset)
    assert b"from_current_location()" in data[start:end]


def test_source_offset_json():
    assert SourceOffset(0).to_json() == 0
    assert SourceOffset.from_json(0) == SourceOffset(0)


def test_source_offset_rejects_negative():
    with pytest.raises(ValueError):
        SourceOffset(-1)


def test_severity_serialize():
    assert Severity.ADVICE.to_json() == "Advice"
    assert Severity.WARNING.to_json() == "Warning"
    assert Severity.ERROR.to_json() == "Error"


def test_severity_deserialize():
    assert Severity.from_json("Advice") is Severity.ADVICE
    assert Severity.from_json("Warning") is Severity.WARNING
    assert Severity.from_json("Error") is Severity.ERROR


def test_severity_unknown():
    with pytest.raises(ValueError):
        Severity.from_json("error")


def test_severity_order():
    parsed = [Severity.from_json(name) for name in ("Error", "Advice", "Warning")]
    assert sorted(parsed) == [Severity.ADVICE, Severity.WARNING, Severity.ERROR]


def test_source_span_serialize():
    assert SourceSpan.of(0).to_dict() == {"offset": 0, "length": 0}


def test_source_span_deserialize():
    assert SourceSpan.from_dict({"offset": 0, "length": 0}) == SourceSpan.of(0)


def test_source_span_deserialize_missing_field():
    with pytest.raises(ValueError):
        SourceSpan.from_dict({"offset": 0})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5, SourceSpan(5, 0)),
        (SourceOffset(4), SourceSpan(4, 0)),
        ((1, 3), SourceSpan(1, 3)),
        ((SourceOffset(2), 7), SourceSpan(2, 7)),
        (range(0, 3), SourceSpan(0, 3)),
        (range(5, 2), SourceSpan(5, 0)),
        (SourceSpan(9, 9), SourceSpan(9, 9)),
    ],
)
def test_source_span_of(value, expected):
    assert SourceSpan.of(value) == expected


def test_source_span_of_rejects_stepped_range():
    with pytest.raises(ValueError):
        SourceSpan.of(range(0, 10, 2))


def test_source_span_of_rejects_other_types():
    with pytest.raises(TypeError):
        SourceSpan.of("abc")


def test_source_span_from_inclusive():
    assert SourceSpan.from_inclusive(2, 4) == SourceSpan(2, 3)
    assert SourceSpan.from_inclusive(3, 3) == SourceSpan(3, 1)
    assert SourceSpan.from_inclusive(4, 2) == SourceSpan(4, 0)


def test_source_span_is_empty():
    assert SourceSpan(3, 0).is_empty() is True
    assert SourceSpan(3, 1).is_empty() is False


def test_labeled_span_at():
    assert LabeledSpan.at(range(0, 3), "should be better") == LabeledSpan(
        "should be better", (0, 3)
    )


def test_labeled_span_at_offset():
    label = LabeledSpan.at_offset(4, "expected a closing parenthesis")
    assert label == LabeledSpan("expected a closing parenthesis", (4, 0))


def test_labeled_span_underline():
    assert LabeledSpan.underline(range(12, 16)) == LabeledSpan(None, (12, 4))


def test_labeled_span_primary():
    label = LabeledSpan.primary_with_span("here", (1, 2))
    assert label.primary is True
    assert LabeledSpan.with_span("here", (1, 2)).primary is False


def test_labeled_span_accessors():
    label = LabeledSpan("x", (7, 3))
    assert label.offset() == 7
    assert label.length() == 3
    assert label.is_empty() is False
    assert LabeledSpan("x", (7, 0)).is_empty() is True


def test_labeled_span_set_label():
    label = LabeledSpan("x", (0, 1))
    label.label = "y"
    assert label == LabeledSpan("y", (0, 1))


def test_labeled_span_serialize():
    assert LabeledSpan(None, (0, 0)).to_dict() == {
        "span": {"offset": 0, "length": 0},
        "primary": False,
    }
    assert LabeledSpan("label", (0, 0)).to_dict() == {
        "label": "label",
        "span": {"offset": 0, "length": 0},
        "primary": False,
    }


def test_labeled_span_deserialize():
    assert LabeledSpan.from_dict(
        {"label": None, "span": {"offset": 0, "length": 0}, "primary": False}
    ) == LabeledSpan(None, (0, 0))
    assert LabeledSpan.from_dict(
        {"span": {"offset": 0, "length": 0}, "primary": False}
    ) == LabeledSpan(None, (0, 0))
    assert LabeledSpan.from_dict(
        {"label": "label", "span": {"offset": 0, "length": 0}, "primary": False}
    ) == LabeledSpan("label", (0, 0))


def test_labeled_span_deserialize_missing_primary():
    with pytest.raises(ValueError):
        LabeledSpan.from_dict({"span": {"offset": 0, "length": 0}})


def test_span_contents_with_language():
    contents = SpanContents(b"abc", SourceSpan(0, 3), 0, 0, 1)
    tagged = contents.with_language("toml")
    assert tagged.language == "toml"
    assert contents.language is None
    assert tagged.data == b"abc"


class _Fixed(SourceCode):
    def read_span(self, span, context_lines_before, context_lines_after):
        if span.offset > 3:
            raise OutOfBoundsError()
        return SpanContents(b"abcd"[span.offset : span.offset + span.length], span, 0, span.offset, 1)


def test_source_code_subclass():
    assert _Fixed().read_span(SourceSpan(1, 2), 0, 0).data == b"bc"
    with pytest.raises(OutOfBoundsError):
        _Fixed().read_span(SourceSpan(9, 1), 0, 0)


def test_source_code_is_abstract():
    with pytest.raises(TypeError):
        SourceCode()


class _Plain(Diagnostic):
    pass


def test_diagnostic_defaults():
    diag = as_diagnostic(_Plain("welp"))
    assert str(diag) == "welp"
    assert [
        diag.code(),
        diag.severity(),
        diag.help(),
        diag.url(),
        diag.source_code(),
        diag.labels(),
        diag.related(),
        diag.diagnostic_source(),
    ] == [None] * 8


class _Custom(Diagnostic):
    def code(self):
        return "A042"

    def severity(self):
        return Severity.ADVICE

    def labels(self):
        return iter([LabeledSpan("lbl", (0, 7))])


def test_diagnostic_overrides():
    diag = _Custom("custom")
    assert diag.code() == "A042"
    assert diag.severity() is Severity.ADVICE
    assert list(diag.labels()) == [LabeledSpan("lbl", (0, 7))]


def test_message_diagnostic():
    diag = as_diagnostic("oh no!")
    assert isinstance(diag, MessageDiagnostic)
    assert str(diag) == "oh no!"
    assert repr(diag) == "'oh no!'"


def test_wrapped_diagnostic_is_transparent():
    inner_cause = KeyError("k")
    try:
        try:
            raise inner_cause
        except KeyError as exc:
            raise ValueError("oh no!") from exc
    except ValueError as err:
        wrapped = as_diagnostic(err)
    assert isinstance(wrapped, WrappedDiagnostic)
    assert str(wrapped) == "oh no!"
    assert wrapped.__cause__ is inner_cause
    assert repr(wrapped) == repr(wrapped.error)


def test_as_diagnostic_keeps_diagnostics():
    diag = _Plain("x")
    assert as_diagnostic(diag) is diag


def test_as_diagnostic_rejects_other():
    with pytest.raises(TypeError):
        as_diagnostic(42)