from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Protocol

from doctag.doc_blocks import LINE_BREAK
from doctag.exceptions import StepFailure
from doctag.validator import DocTagValidator, Violation

_WILDCARD_IMPORT_RE = re.compile(r"^\s*import\s+(?:static\s+)?[\w.]+\.\*\s*;")


class CheckStep(Protocol):
    name: str

    def apply(self, source: str, *, path: str | None = None) -> str: ...


@dataclass(frozen=True)
class WildcardImportStep:
    name: str = "wildcard_imports"

    def scan(self, source: str, *, path: str | None = None) -> tuple[Violation, ...]:
        return tuple(
            Violation(
                line=number,
                message=f"wildcard import at line {number}",
                path=path,
            )
            for number, line in enumerate(source.split(LINE_BREAK), start=1)
            if _WILDCARD_IMPORT_RE.match(line)
        )

    def apply(self, source: str, *, path: str | None = None) -> str:
        violations = self.scan(source, path=path)
        if violations:
            raise StepFailure(violations, path=path)
        return source


def default_steps(
    *,
    tag: str,
    marker: str,
    forbid_wildcard_imports: bool = True,
) -> tuple[CheckStep, ...]:
    steps: list[CheckStep] = [DocTagValidator(tag=tag, marker=marker)]
    if forbid_wildcard_imports:
        steps.append(WildcardImportStep())
    return tuple(steps)


__all__ = ["CheckStep", "WildcardImportStep", "default_steps"]
