from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from .errors import ScriptError
from .exit_codes import ERR_USAGE

OutputFormat = Literal["text", "json"]


def default_run_id() -> str:
    return f"snipcheck-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"


def resolve_output_format(*, cli_json: bool, cli_format: str | None, ci_present: bool) -> OutputFormat:
    if cli_json:
        return "json"
    if cli_format:
        return "json" if cli_format == "json" else "text"
    return "json" if ci_present else "text"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool

    @property
    def as_json(self) -> bool:
        return self.output_format == "json"

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        root: str | Path | None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        resolved_root = Path(root or ".").expanduser().resolve()
        if not resolved_root.is_dir():
            raise ScriptError(f"scan root is not a directory: {resolved_root}", ERR_USAGE, kind="bad_root")
        return cls(
            run_id=run_id or os.environ.get("SNIPCHECK_RUN_ID") or default_run_id(),
            root=resolved_root,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
        )
