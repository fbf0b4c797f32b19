import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    # keep the developer's own project settings out of every test
    for name in ("DATABASE_URL", "SYMFONY_BOOST_PROJECT_PATH", "SYMFONY_BOOST_CONFIG", "SYMFONY_BOOST_LOG_LEVEL", "SYMFONY_BOOST_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def symfony_project(tmp_path):
    """A minimal Symfony-shaped project tree."""
    root = tmp_path / "shop"
    (root / "bin").mkdir(parents=True)
    (root / "bin" / "console").write_text("#!/usr/bin/env php\n<?php\n", encoding="utf-8")
    (root / "var" / "log").mkdir(parents=True)
    (root / "config").mkdir()
    (root / "src" / "Entity").mkdir(parents=True)
    return root
