from pathlib import Path

import pytest

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture(autouse=True)
def _default_tracker_runtime(monkeypatch):
    # Generated output depends on the tracker import path; keep it stable.
    monkeypatch.delenv("GENMOCK_TRACKER_IMPORT", raising=False)


@pytest.fixture
def testdata() -> Path:
    return TESTDATA
