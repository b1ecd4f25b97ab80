"""Documentation-tag rule.

Every documentation-comment block must mention the required tag somewhere in
its text. The check is detect-only: a passing text is handed back verbatim, a
failing one yields every offending block, keyed by the block's last line.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from doctag.doc_blocks import DEFAULT_MARKER, DocBlock, segment_blocks
from doctag.exceptions import MissingTagError

DEFAULT_TAG = "@since"


@dataclass(frozen=True)
class Violation:
    line: int
    message: str
    path: str | None = None

    def render(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}:{self.line}: {self.message}"

    def to_payload(self) -> dict[str, object]:
        return {
            "path": self.path,
            "line": self.line,
            "message": self.message,
            "render": self.render(),
        }


@dataclass(frozen=True)
class ValidationResult:
    text: str
    violations: tuple[Violation, ...] = field(default_factory=tuple)
    path: str | None = None

    @property
    def ok(self) -> bool:
        return not self.violations

    def failure_message(self) -> str:
        return "\n".join(v.render() for v in self.violations)

    def raise_for_violations(self) -> str:
        if self.violations:
            raise MissingTagError(self.violations, path=self.path)
        return self.text


@dataclass(frozen=True)
class DocTagValidator:
    tag: str = DEFAULT_TAG
    marker: str = DEFAULT_MARKER
    name: str = "doc_tag"

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("required tag must be a non-empty string")
        if not self.marker:
            raise ValueError("documentation marker must be a non-empty string")
        if self.marker != self.marker.lstrip():
            raise ValueError("documentation marker must not start with whitespace")

    def blocks(self, source: str) -> tuple[DocBlock, ...]:
        return segment_blocks(source, marker=self.marker)

    def scan(self, source: str, *, path: str | None = None) -> tuple[Violation, ...]:
        return tuple(
            Violation(
                line=block.end_line,
                message=f"missing required tag at line {block.end_line}",
                path=path,
            )
            for block in self.blocks(source)
            if not block.contains(self.tag)
        )

    def validate(self, source: str, *, path: str | None = None) -> ValidationResult:
        return ValidationResult(
            text=source,
            violations=self.scan(source, path=path),
            path=path,
        )

    def apply(self, source: str, *, path: str | None = None) -> str:
        """Pipeline step entry point: return ``source`` or raise MissingTagError."""
        return self.validate(source, path=path).raise_for_violations()


_DEFAULT_VALIDATOR = DocTagValidator()


def validate(source: str, *, path: str | None = None) -> ValidationResult:
    return _DEFAULT_VALIDATOR.validate(source, path=path)


__all__ = [
    "DEFAULT_TAG",
    "DocTagValidator",
    "ValidationResult",
    "Violation",
    "validate",
]
