from __future__ import annotations

import json
from pathlib import Path

from doctag.pipeline import READ_STEP, check_text, resolve_inventory, run_pipeline
from doctag.steps import default_steps

_TAGGED = "/// Thing.\n/// @since 1.0\npublic final class Ok {}\n"
_UNTAGGED = "import java.util.*;\n\n/// Thing.\npublic final class Bad {}\n"


def test_resolve_inventory_applies_include_and_exclude(tmp_path: Path, write_source) -> None:
    write_source(tmp_path / "src/main/java/a/Ok.java", _TAGGED)
    write_source(tmp_path / "src/test/java/a/OkTest.java", _TAGGED)
    write_source(tmp_path / "build/src/main/java/Gen.java", _UNTAGGED)
    write_source(tmp_path / "src/main/resources/notes.txt", "/// nope\n")

    files = resolve_inventory(
        root=tmp_path,
        include=["src/*/java/**/*.java", "build/**/*.java"],
        exclude=["build/**"],
    )
    rels = [path.relative_to(tmp_path.resolve()).as_posix() for path in files]
    assert rels == ["src/main/java/a/Ok.java", "src/test/java/a/OkTest.java"]


def test_run_pipeline_aggregates_all_steps_and_files(tmp_path: Path, write_source) -> None:
    ok = write_source(tmp_path / "src/main/java/Ok.java", _TAGGED)
    bad = write_source(tmp_path / "src/main/java/Bad.java", _UNTAGGED)

    result = run_pipeline(
        [bad, ok],
        steps=default_steps(tag="@since", marker="///"),
        root=tmp_path,
    )
    assert not result.ok
    assert result.steps == ("doc_tag", "wildcard_imports")
    assert [item.path for item in result.files] == [
        "src/main/java/Bad.java",
        "src/main/java/Ok.java",
    ]
    assert [item.path for item in result.failed_files()] == ["src/main/java/Bad.java"]
    assert result.total_violations() == 2
    assert [v.render() for v in result.violations_for_step("doc_tag")] == [
        "src/main/java/Bad.java:3: missing required tag at line 3"
    ]
    assert [v.line for v in result.violations_for_step("wildcard_imports")] == [1]


def test_run_pipeline_reports_unreadable_files(tmp_path: Path, write_source) -> None:
    missing = tmp_path / "src/main/java/Gone.java"
    binary = tmp_path / "src/main/java/Blob.java"
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_bytes(b"\xff\xfe\x00bad")

    result = run_pipeline([missing, binary], steps=default_steps(tag="@since", marker="///"), root=tmp_path)
    assert len(result.failed_files()) == 2
    for item in result.files:
        assert [outcome.step for outcome in item.failures] == [READ_STEP]
        assert item.violations()[0].message.startswith("unable to read file")


def test_run_pipeline_normalizes_windows_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "Crlf.java"
    path.write_bytes(b"/// Doc.\r\n/// @since 1.0\r\nclass C {}\r\n/// Other.\r\nclass D {}\r\n")
    result = run_pipeline([path], steps=default_steps(tag="@since", marker="///"), root=tmp_path)
    assert [v.line for v in result.violations_for_step("doc_tag")] == [4]


def test_check_text_does_not_short_circuit() -> None:
    failures = check_text(_UNTAGGED, steps=default_steps(tag="@since", marker="///"))
    assert [outcome.step for outcome in failures] == ["doc_tag", "wildcard_imports"]


def test_pipeline_payload_and_artifact(tmp_path: Path, write_source) -> None:
    bad = write_source(tmp_path / "Bad.java", _UNTAGGED)
    result = run_pipeline([bad], steps=default_steps(tag="@since", marker="///"), root=tmp_path)
    artifact = result.write_artifact(tmp_path / "artifacts/out/doctag_results.json")
    payload = json.loads(artifact.read_text(encoding="utf-8"))
    assert payload["format_version"] == 1
    assert payload["files_checked"] == 1
    assert payload["counts"] == {"doc_tag": 1, "wildcard_imports": 1}
    entry = payload["violations"]["Bad.java"]["doc_tag"][0]
    assert entry == {
        "path": "Bad.java",
        "line": 3,
        "message": "missing required tag at line 3",
        "render": "Bad.java:3: missing required tag at line 3",
    }
