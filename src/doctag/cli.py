from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from doctag import __version__
from doctag.config import check_settings, doctag_defaults, merge_payload
from doctag.pipeline import PipelineResult, resolve_inventory, run_pipeline
from doctag.steps import default_steps

app = typer.Typer(add_completion=False, help="Documentation tag checks for source trees.")


@app.callback()
def main() -> None:
    """doctag command line."""


def _report(result: PipelineResult) -> None:
    for item in result.failed_files():
        for outcome in item.failures:
            for violation in outcome.violations:
                typer.echo(f"{violation.render()} [{outcome.step}]", err=True)
    failed = len(result.failed_files())
    typer.echo(
        f"doctag: checked {len(result.files)} file(s); "
        f"{result.total_violations()} violation(s) in {failed} file(s)"
    )


@app.command("check")
def check(
    paths: List[Path] = typer.Argument(None, help="Files to check (defaults to the configured inventory)."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Required tag substring."),
    marker: Optional[str] = typer.Option(None, "--marker", help="Documentation-comment marker."),
    allow_wildcard_imports: bool = typer.Option(
        False,
        "--allow-wildcard-imports",
        help="Skip the wildcard import check.",
    ),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the JSON result artifact."),
) -> None:
    for option, value in (("--tag", tag), ("--marker", marker)):
        if value is not None and not value:
            raise typer.BadParameter("must be a non-empty string", param_hint=option)
    defaults = doctag_defaults(root=root, config_path=config)
    overrides: dict[str, object] = {"tag": tag, "marker": marker}
    if allow_wildcard_imports:
        overrides["forbid_wildcard_imports"] = False
    settings = check_settings(merge_payload(overrides, defaults))
    if paths:
        missing = [str(path) for path in paths if not path.is_file()]
        if missing:
            raise typer.BadParameter(f"not a file: {', '.join(missing)}", param_hint="PATHS")
        files = tuple(paths)
    else:
        files = resolve_inventory(root=root, include=settings.include, exclude=settings.exclude)
    try:
        steps = default_steps(
            tag=settings.tag,
            marker=settings.marker,
            forbid_wildcard_imports=settings.forbid_wildcard_imports,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    result = run_pipeline(files, steps=steps, root=root)
    _report(result)
    if out is not None:
        typer.echo(f"Wrote doctag results: {result.write_artifact(out)}")
    raise typer.Exit(code=0 if result.ok else 1)


@app.command("version")
def version() -> None:
    typer.echo(__version__)


if __name__ == "__main__":
    app()
