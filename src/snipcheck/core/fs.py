from __future__ import annotations

from pathlib import Path

from .errors import ScriptError
from .exit_codes import ERR_USAGE
from .serialize import dumps_json


def looks_binary(text: str) -> bool:
    return "\x00" in text


def read_text_or_none(path: Path) -> str | None:
    """Read ``path`` as UTF-8, returning ``None`` for unreadable or binary files."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    if looks_binary(text):
        return None
    return text


def write_json(path: Path, payload: dict[str, object]) -> Path:
    out = path.expanduser().resolve()
    if out.is_dir():
        raise ScriptError(f"output path is a directory: {out}", ERR_USAGE, kind="bad_out_file")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dumps_json(payload, pretty=True) + "\n", encoding="utf-8")
    return out
