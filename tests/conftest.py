import pytest


@pytest.fixture(autouse=True)
def _isolate_circleci_env(monkeypatch):
    """Keep the developer's CIRCLECI_* settings out of the tests."""
    for var in ("CIRCLECI_TOKEN", "CIRCLECI_VCS_TYPE", "CIRCLECI_ORGANIZATION", "CIRCLECI_BASE_URL"):
        monkeypatch.delenv(var, raising=False)
