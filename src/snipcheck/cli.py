from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from . import __version__
from .config.loader import ScanConfig, load_scan_config
from .core.context import RunContext, resolve_output_format
from .core.errors import ScriptError
from .core.exit_codes import ERR_FINDINGS, ERR_INTERNAL, ERR_USAGE, OK
from .core.fs import write_json
from .core.logging import log_event
from .core.scan import iter_sources
from .core.serialize import dumps_json
from .markers.aggregate import TreeReport, build_tree_report
from .markers.nesting import MismatchPolicy
from .reporting.payload import report_failed, tree_payload
from .reporting.text import render_text

SCAN_COMMANDS = ("scan", "nesting", "substrings")


def _add_scan_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("root", nargs="?", default=".", help="directory to scan (default: current directory)")
    p.add_argument("--config", help="YAML config file (default: <root>/.snipcheck.yaml when present)")
    p.add_argument("--exclude", action="append", default=[], metavar="DIR", help="extra directory name to skip")
    p.add_argument(
        "--mismatch-policy",
        choices=[policy.value for policy in MismatchPolicy],
        default=None,
        help="how an END naming a different tag than the innermost open region is resolved",
    )
    p.add_argument("--jobs", type=int, default=None, help="parallel workers for the per-file phase")
    p.add_argument("--max-examples", type=int, default=None, help="examples shown per entry in text output")
    p.add_argument("--out-file", help="also write the JSON report to this path")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="snipcheck",
        description="Check [START tag]/[END tag] snippet markers for nesting, pairing and substring ambiguity.",
    )
    p.add_argument("--version", action="version", version=f"snipcheck {__version__}")
    p.add_argument("--run-id", help="run identifier for logs and reports")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--json", action="store_true", help="shortcut for --format json")
    p.add_argument("--log-json", action="store_true", help="emit structured log lines as JSON")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable verbose diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    scan_p = sub.add_parser("scan", help="report nesting, pairing errors and substring ambiguity")
    _add_scan_args(scan_p)
    scan_p.add_argument("--strict", action="store_true", help="also fail when tags are substrings of other tags")

    nesting_p = sub.add_parser("nesting", help="report nested regions and pairing errors only")
    _add_scan_args(nesting_p)

    substrings_p = sub.add_parser("substrings", help="report tags that are substrings of other tags only")
    _add_scan_args(substrings_p)
    substrings_p.add_argument("--strict", action="store_true", help="fail when any substring relationship exists")

    sub.add_parser("version", help="print version")
    return p


def _resolve_config(ctx: RunContext, ns: argparse.Namespace) -> ScanConfig:
    config = load_scan_config(ctx.root, ns.config)
    return config.with_overrides(
        extra_excludes=ns.exclude,
        mismatch_policy=ns.mismatch_policy,
        jobs=ns.jobs,
        strict=bool(getattr(ns, "strict", False)),
        max_examples=ns.max_examples,
    )


def run_scan_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    config = _resolve_config(ctx, ns)
    log_event(
        ctx,
        "debug",
        "scan",
        "config",
        source=str(config.source) if config.source else "defaults",
        policy=config.mismatch_policy.value,
        jobs=config.jobs,
        excluded=",".join(sorted(config.exclude_dirs)),
    )
    report: TreeReport = build_tree_report(
        iter_sources(ctx.root, config.exclude_dirs),
        policy=config.mismatch_policy,
        jobs=config.jobs,
    )
    summary = report.summary()
    log_event(
        ctx,
        "info",
        "scan",
        "complete",
        files=summary.files_scanned,
        files_with_tags=summary.files_with_tags,
        skipped=summary.files_skipped,
        errors=summary.errors,
        substring_relationships=summary.substring_relationships,
    )
    payload = tree_payload(
        report,
        run_id=ctx.run_id,
        root=ctx.root,
        kind=ns.cmd,
        policy=config.mismatch_policy,
        strict=config.strict,
    )
    if ns.out_file:
        out = write_json(Path(ns.out_file), payload)
        log_event(ctx, "debug", "scan", "write", path=str(out))
    if ctx.as_json:
        print(dumps_json(payload))
    else:
        print(render_text(report, ctx.root, kind=ns.cmd, max_examples=config.max_examples))
    return ERR_FINDINGS if report_failed(report, ns.cmd, config.strict) else OK


def render_error(*, as_json: bool, message: str, code: int) -> str:
    if as_json:
        return dumps_json(
            {
                "schema_version": 1,
                "tool": "snipcheck",
                "status": "error",
                "errors": [{"code": code, "message": message}],
            }
        )
    return message


def main(argv: list[str] | None = None) -> int:
    raw_argv = argv if argv is not None else sys.argv[1:]
    ns = build_parser().parse_args(raw_argv)
    fmt = resolve_output_format(cli_json=ns.json, cli_format=ns.format, ci_present=bool(os.environ.get("CI")))
    as_json = fmt == "json"
    try:
        if ns.cmd == "version":
            print(dumps_json({"tool": "snipcheck", "version": __version__}) if as_json else f"snipcheck {__version__}")
            return OK
        ctx = RunContext.from_args(ns.run_id, ns.root, fmt, ns.verbose, ns.quiet, ns.log_json)
        log_event(ctx, "debug", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format, root=str(ctx.root))
        if ns.cmd in SCAN_COMMANDS:
            return run_scan_command(ctx, ns)
        return ERR_USAGE
    except ScriptError as exc:
        print(render_error(as_json=as_json, message=str(exc), code=exc.code), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(render_error(as_json=as_json, message=f"internal error: {exc}", code=ERR_INTERNAL), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
