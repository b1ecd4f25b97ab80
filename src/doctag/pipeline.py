from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from fnmatch import fnmatchcase
import json
from pathlib import Path
from typing import Iterable, Sequence

from doctag.exceptions import StepFailure
from doctag.steps import CheckStep
from doctag.validator import Violation

READ_STEP = "read"
_FORMAT_VERSION = 1


@dataclass(frozen=True)
class StepOutcome:
    step: str
    violations: tuple[Violation, ...]


@dataclass(frozen=True)
class FileResult:
    path: str
    failures: tuple[StepOutcome, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def violations(self) -> list[Violation]:
        return [item for outcome in self.failures for item in outcome.violations]


@dataclass(frozen=True)
class PipelineResult:
    root: Path
    steps: tuple[str, ...]
    files: tuple[FileResult, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return all(item.ok for item in self.files)

    def total_violations(self) -> int:
        return sum(len(item.violations()) for item in self.files)

    def failed_files(self) -> list[FileResult]:
        return [item for item in self.files if not item.ok]

    def violations_for_step(self, step: str) -> list[Violation]:
        return [
            violation
            for item in self.files
            for outcome in item.failures
            if outcome.step == step
            for violation in outcome.violations
        ]

    def to_payload(self) -> dict[str, object]:
        counts = {step: len(self.violations_for_step(step)) for step in self.steps}
        return {
            "format_version": _FORMAT_VERSION,
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "root": str(self.root),
            "steps": list(self.steps),
            "files_checked": len(self.files),
            "counts": counts,
            "violations": {
                item.path: {
                    outcome.step: [v.to_payload() for v in outcome.violations]
                    for outcome in item.failures
                }
                for item in self.failed_files()
            },
        }

    def write_artifact(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.to_payload(), indent=2, sort_keys=False) + "\n",
            encoding="utf-8",
        )
        return path


def _is_excluded(rel_path: str, exclude: Iterable[str]) -> bool:
    return any(fnmatchcase(rel_path, pattern) for pattern in exclude)


def resolve_inventory(
    *,
    root: Path,
    include: Sequence[str],
    exclude: Sequence[str] = (),
) -> tuple[Path, ...]:
    resolved_root = root.resolve()
    files: set[Path] = set()
    for pattern in include:
        for path in resolved_root.glob(pattern):
            if not path.is_file():
                continue
            rel_path = path.relative_to(resolved_root).as_posix()
            if _is_excluded(rel_path, exclude):
                continue
            files.add(path.resolve())
    return tuple(sorted(files, key=lambda item: str(item)))


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def check_text(
    source: str,
    *,
    steps: Sequence[CheckStep],
    path: str | None = None,
) -> tuple[StepOutcome, ...]:
    failures: list[StepOutcome] = []
    for step in steps:
        try:
            step.apply(source, path=path)
        except StepFailure as exc:
            failures.append(StepOutcome(step=step.name, violations=exc.violations))
    return tuple(failures)


def check_file(path: Path, *, steps: Sequence[CheckStep], root: Path) -> FileResult:
    rel_path = _display_path(path, root)
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return FileResult(
            path=rel_path,
            failures=(
                StepOutcome(
                    step=READ_STEP,
                    violations=(
                        Violation(line=1, message=f"unable to read file: {reason}", path=rel_path),
                    ),
                ),
            ),
        )
    return FileResult(path=rel_path, failures=check_text(source, steps=steps, path=rel_path))


def run_pipeline(
    files: Iterable[Path],
    *,
    steps: Sequence[CheckStep],
    root: Path,
) -> PipelineResult:
    resolved_root = root.resolve()
    results = tuple(check_file(path, steps=steps, root=resolved_root) for path in files)
    return PipelineResult(
        root=resolved_root,
        steps=tuple(step.name for step in steps),
        files=results,
    )


__all__ = [
    "FileResult",
    "PipelineResult",
    "READ_STEP",
    "StepOutcome",
    "check_file",
    "check_text",
    "resolve_inventory",
    "run_pipeline",
]
