import pytest
from loguru import logger

from prefdiff import config as config_module

from mocks import AFTER_DOMAINS, BEFORE_DOMAINS, make_snapshot


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [])
    for name in ("EXECUTABLE", "TIMEOUT", "MAX_WORKERS", "LOG_LEVEL", "LOG_DIR"):
        monkeypatch.delenv(f"PREFDIFF_{name}", raising=False)
    yield
    logger.remove()


@pytest.fixture
def before_snapshot():
    return make_snapshot(BEFORE_DOMAINS)


@pytest.fixture
def after_snapshot():
    return make_snapshot(AFTER_DOMAINS)
