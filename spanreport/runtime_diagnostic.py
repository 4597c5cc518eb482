"""A diagnostic whose message and metadata are chosen at runtime."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from spanreport.protocol import Diagnostic, LabeledSpan, Severity

_UNSET: Any = object()


def _check_label(label: Any) -> LabeledSpan:
    if not isinstance(label, LabeledSpan):
        raise TypeError(f"expected a LabeledSpan, not {type(label).__name__}")
    return label


def _optional_str(value: Any, what: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise TypeError(f"{what} must be a str or None, not {type(value).__name__}")


class RuntimeDiagnostic(Diagnostic):
    """A diagnostic built from plain values.

    The ``with_*`` and ``and_*`` methods return a new diagnostic and leave
    the original unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        severity: Severity | None = None,
        help: str | None = None,
        url: str | None = None,
        labels: Iterable[LabeledSpan] | None = None,
    ) -> None:
        message = str(message)
        super().__init__(message)
        self.message = message
        self._code = _optional_str(code, "code")
        if severity is not None and not isinstance(severity, Severity):
            raise TypeError(f"severity must be a Severity, not {type(severity).__name__}")
        self._severity = severity
        self._help = _optional_str(help, "help")
        self._url = _optional_str(url, "url")
        self._labels = None if labels is None else [_check_label(label) for label in labels]

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        parts = [repr(self.message)]
        for name in ("code", "severity", "help", "url"):
            value = getattr(self, f"_{name}")
            if value is not None:
                parts.append(f"{name}={value!r}")
        if self._labels is not None:
            parts.append(f"labels={self._labels!r}")
        return f"RuntimeDiagnostic({', '.join(parts)})"

    def _fields(self) -> tuple[Any, ...]:
        return (self.message, self._code, self._severity, self._help, self._url, self._labels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuntimeDiagnostic):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None  # type: ignore[assignment]

    def _replace(
        self,
        *,
        code: Any = _UNSET,
        severity: Any = _UNSET,
        help: Any = _UNSET,
        url: Any = _UNSET,
        labels: Any = _UNSET,
    ) -> RuntimeDiagnostic:
        return RuntimeDiagnostic(
            self.message,
            code=self._code if code is _UNSET else code,
            severity=self._severity if severity is _UNSET else severity,
            help=self._help if help is _UNSET else help,
            url=self._url if url is _UNSET else url,
            labels=self._labels if labels is _UNSET else labels,
        )

    def code(self) -> str | None:
        return self._code

    def severity(self) -> Severity | None:
        return self._severity

    def help(self) -> str | None:
        return self._help

    def url(self) -> str | None:
        return self._url

    def labels(self) -> Iterator[LabeledSpan] | None:
        return None if self._labels is None else iter(list(self._labels))

    def with_code(self, code: str) -> RuntimeDiagnostic:
        """Return a copy with the given code."""
        return self._replace(code=str(code))

    def with_severity(self, severity: Severity) -> RuntimeDiagnostic:
        """Return a copy with the given severity."""
        return self._replace(severity=severity)

    def with_help(self, help: str) -> RuntimeDiagnostic:
        """Return a copy with the given help text."""
        return self._replace(help=str(help))

    def with_url(self, url: str) -> RuntimeDiagnostic:
        """Return a copy with the given URL."""
        return self._replace(url=str(url))

    def with_label(self, label: LabeledSpan) -> RuntimeDiagnostic:
        """Return a copy whose only label is ``label``."""
        return self._replace(labels=[_check_label(label)])

    def with_labels(self, labels: Iterable[LabeledSpan]) -> RuntimeDiagnostic:
        """Return a copy whose labels are exactly ``labels``."""
        return self._replace(labels=list(labels))

    def and_label(self, label: LabeledSpan) -> RuntimeDiagnostic:
        """Return a copy with ``label`` added after the existing labels."""
        return self._replace(labels=[*(self._labels or []), _check_label(label)])

    def and_labels(self, labels: Iterable[LabeledSpan]) -> RuntimeDiagnostic:
        """Return a copy with ``labels`` added after the existing labels."""
        return self._replace(labels=[*(self._labels or []), *labels])

    def to_dict(self) -> dict[str, Any]:
        """Serialise; fields that are None are left out."""
        data: dict[str, Any] = {"message": self.message}
        if self._code is not None:
            data["code"] = self._code
        if self._severity is not None:
            data["severity"] = self._severity.to_json()
        if self._help is not None:
            data["help"] = self._help
        if self._url is not None:
            data["url"] = self._url
        if self._labels is not None:
            data["labels"] = [label.to_dict() for label in self._labels]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuntimeDiagnostic:
        """Parse the form produced by :meth:`to_dict`; optional fields may be null."""
        try:
            message = data["message"]
        except KeyError:
            raise ValueError("diagnostic is missing field 'message'") from None
        if not isinstance(message, str):
            raise TypeError("message must be a str")
        severity = data.get("severity")
        labels = data.get("labels")
        return cls(
            message,
            code=data.get("code"),
            severity=None if severity is None else Severity.from_json(severity),
            help=data.get("help"),
            url=data.get("url"),
            labels=None if labels is None else [LabeledSpan.from_dict(item) for item in labels],
        )