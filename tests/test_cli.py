from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers import run_snipcheck
from snipcheck import __version__
from snipcheck.cli import main
from snipcheck.core.exit_codes import ERR_CONFIG, ERR_FINDINGS, ERR_USAGE, OK


def _clean_tree(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "A.kt").write_text("// [START alpha]\n// [START beta]\n// [END beta]\n// [END alpha]\n", encoding="utf-8")
    return root


def test_scan_json_reports_findings(marker_tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--json", "--quiet", "--run-id", "t1", "scan", str(marker_tree)])
    assert code == ERR_FINDINGS
    payload = json.loads(capsys.readouterr().out)
    assert payload["run_id"] == "t1"
    assert payload["status"] == "fail"
    assert payload["summary"]["errors"] == 1
    assert payload["summary"]["substring_relationships"] == 1


def test_clean_tree_exits_ok(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _clean_tree(tmp_path / "clean")
    assert main(["--format", "text", "--quiet", "scan", str(root)]) == OK
    out = capsys.readouterr().out
    assert "Found 1 nested tag pairs in 1 files with tags" in out
    assert "Tag errors found: 0" in out


def test_strict_flag_fails_on_ambiguity(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "amb"
    root.mkdir()
    (root / "a.py").write_text("# [START foo]\n# [END foo]\n# [START foo_bar]\n# [END foo_bar]\n", encoding="utf-8")
    assert main(["--quiet", "substrings", str(root)]) == OK
    assert main(["--quiet", "substrings", "--strict", str(root)]) == ERR_FINDINGS
    assert main(["--quiet", "nesting", str(root)]) == OK
    capsys.readouterr()


def test_exclude_flag_and_out_file(marker_tree: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_file = tmp_path / "out/report.json"
    code = main(["--quiet", "nesting", str(marker_tree), "--exclude", "src", "--out-file", str(out_file)])
    assert code == OK
    payload = json.loads(out_file.read_text(encoding="utf-8"))
    assert payload["kind"] == "nesting"
    assert payload["files"] == []
    capsys.readouterr()


def test_mismatch_policy_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "p"
    root.mkdir()
    (root / "x.kt").write_text("[START a]\n[END b]\n[END a]\n", encoding="utf-8")
    main(["--json", "--quiet", "nesting", str(root)])
    pop = json.loads(capsys.readouterr().out)
    main(["--json", "--quiet", "nesting", "--mismatch-policy", "search", str(root)])
    search = json.loads(capsys.readouterr().out)
    assert pop["summary"]["errors"] == 2
    assert search["summary"]["errors"] == 1
    assert search["mismatch_policy"] == "search"


def test_bad_config_returns_config_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _clean_tree(tmp_path / "cfg")
    (root / ".snipcheck.yaml").write_text("bogus: 1\n", encoding="utf-8")
    assert main(["--json", "scan", str(root)]) == ERR_CONFIG
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["status"] == "error"
    assert err["errors"][0]["code"] == ERR_CONFIG


def test_missing_root_returns_usage_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", str(tmp_path / "missing")]) == ERR_USAGE
    assert "scan root is not a directory" in capsys.readouterr().err


def test_version_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--format", "text", "version"]) == OK
    assert capsys.readouterr().out.strip() == f"snipcheck {__version__}"


@pytest.mark.integration
def test_module_entrypoint_scans_tree(marker_tree: Path) -> None:
    proc = run_snipcheck("--json", "--log-json", "scan", str(marker_tree), "--jobs", "2")
    assert proc.returncode == ERR_FINDINGS, proc.stderr
    payload = json.loads(proc.stdout)
    assert payload["run_id"] == "pytest-run"
    assert payload["summary"]["files_with_tags"] == 3
    logs = [json.loads(line) for line in proc.stderr.splitlines() if line.strip()]
    assert any(row["action"] == "complete" for row in logs)


@pytest.mark.integration
def test_module_help_lists_commands() -> None:
    proc = run_snipcheck("--help")
    assert proc.returncode == 0, proc.stderr
    for name in ("scan", "nesting", "substrings", "version"):
        assert name in proc.stdout
