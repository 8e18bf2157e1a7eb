# tests/conftest.py
import pytest

from nextpiece.core import log
from nextpiece.core import metrics


@pytest.fixture(scope="session", autouse=True)
def _bootstrap_logging():
    # Setup logging (reads LOG_LEVEL / LOG_JSON / .env if available)
    log.setup()
    yield


@pytest.fixture(autouse=True)
def _clean_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture(autouse=True)
def _no_preview_env(monkeypatch):
    # ไม่ให้ env ของเครื่องมากระทบค่า config ในเทสต์
    for k in ("PREVIEW_CAPACITY", "PREVIEW_SEED", "PREVIEW_KINDS"):
        monkeypatch.delenv(k, raising=False)
