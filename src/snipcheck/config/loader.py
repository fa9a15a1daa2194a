from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_CONFIG
from ..core.scan import DEFAULT_EXCLUDED_DIRS
from ..markers.nesting import MismatchPolicy

CONFIG_FILE_NAME = ".snipcheck.yaml"

_KNOWN_KEYS = frozenset({"exclude_dirs", "extra_exclude_dirs", "mismatch_policy", "jobs", "strict", "max_examples"})


@dataclass(frozen=True)
class ScanConfig:
    exclude_dirs: frozenset[str] = field(default_factory=lambda: DEFAULT_EXCLUDED_DIRS)
    mismatch_policy: MismatchPolicy = MismatchPolicy.POP
    jobs: int = 1
    strict: bool = False
    max_examples: int = 3
    source: Path | None = None

    def with_overrides(
        self,
        *,
        extra_excludes: list[str] | None = None,
        mismatch_policy: str | None = None,
        jobs: int | None = None,
        strict: bool | None = None,
        max_examples: int | None = None,
    ) -> "ScanConfig":
        out = self
        if extra_excludes:
            out = replace(out, exclude_dirs=out.exclude_dirs | frozenset(extra_excludes))
        if mismatch_policy:
            out = replace(out, mismatch_policy=MismatchPolicy(mismatch_policy))
        if jobs is not None:
            out = replace(out, jobs=_positive_int("jobs", jobs, None))
        if strict:
            out = replace(out, strict=True)
        if max_examples is not None:
            out = replace(out, max_examples=_positive_int("max_examples", max_examples, None))
        return out


def _fail(source: Path | None, message: str) -> ScriptError:
    where = str(source) if source else "<cli>"
    return ScriptError(f"invalid config {where}: {message}", ERR_CONFIG, kind="bad_config")


def _positive_int(key: str, value: Any, source: Path | None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise _fail(source, f"`{key}` must be an integer >= 1, got {value!r}")
    return value


def _str_list(key: str, value: Any, source: Path | None) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise _fail(source, f"`{key}` must be a list of directory names")
    return [item.strip() for item in value]


def parse_scan_config(data: Any, source: Path | None = None) -> ScanConfig:
    if data is None:
        return ScanConfig(source=source)
    if not isinstance(data, dict):
        raise _fail(source, "root must be a mapping")
    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        raise _fail(source, f"unknown keys: {', '.join(unknown)}")

    excludes = frozenset(_str_list("exclude_dirs", data["exclude_dirs"], source)) if "exclude_dirs" in data else DEFAULT_EXCLUDED_DIRS
    if "extra_exclude_dirs" in data:
        excludes = excludes | frozenset(_str_list("extra_exclude_dirs", data["extra_exclude_dirs"], source))

    policy = MismatchPolicy.POP
    if "mismatch_policy" in data:
        try:
            policy = MismatchPolicy(str(data["mismatch_policy"]).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(p.value for p in MismatchPolicy)
            raise _fail(source, f"`mismatch_policy` must be one of: {allowed}") from exc

    strict = data.get("strict", False)
    if not isinstance(strict, bool):
        raise _fail(source, "`strict` must be a boolean")

    return ScanConfig(
        exclude_dirs=excludes,
        mismatch_policy=policy,
        jobs=_positive_int("jobs", data.get("jobs", 1), source),
        strict=strict,
        max_examples=_positive_int("max_examples", data.get("max_examples", 3), source),
        source=source,
    )


def load_scan_config(root: Path, explicit: str | Path | None = None) -> ScanConfig:
    """Load ``explicit`` or ``<root>/.snipcheck.yaml``; defaults when neither exists."""
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ScriptError(f"config file not found: {path}", ERR_CONFIG, kind="missing_config")
    else:
        path = root / CONFIG_FILE_NAME
        if not path.is_file():
            return ScanConfig()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise _fail(path, f"yaml parse error: {exc}") from exc
    return parse_scan_config(data, source=path)
