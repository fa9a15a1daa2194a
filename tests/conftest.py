from __future__ import annotations

import socket
from pathlib import Path

import pytest
from hypothesis import settings

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile("snipcheck", database=None, deadline=None)
settings.load_profile("snipcheck")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture
def marker_tree(tmp_path: Path) -> Path:
    """A small source tree with nesting, a pairing error, an ambiguous tag and excluded dirs."""
    root = tmp_path / "repo"
    (root / "app/src").mkdir(parents=True)
    (root / "app/src/Main.kt").write_text(
        "\n".join(
            [
                "// [START outer]",
                "fun a() {}",
                "// [START inner]",
                "fun b() {}",
                "// [END inner]",
                "// [END outer]",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    (root / "app/src/Broken.java").write_text(
        "// [START foo]\nclass A {}\n// [END bar]\n",
        encoding="utf-8",
    )
    (root / "app/src/Other.java").write_text(
        "// [START foo_bar]\nclass B {}\n// [END foo_bar]\n",
        encoding="utf-8",
    )
    (root / "README.md").write_text("no markers here\n", encoding="utf-8")
    (root / "node_modules/pkg").mkdir(parents=True)
    (root / "node_modules/pkg/index.js").write_text("// [END stray]\n", encoding="utf-8")
    (root / "build").mkdir()
    (root / "build/Gen.kt").write_text("// [START generated]\n", encoding="utf-8")
    (root / "logo.bin").write_bytes(b"\x89PNG\x00\x01[START nope]\xff\xfe")
    return root
