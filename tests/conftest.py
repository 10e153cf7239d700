import pytest

from zenpowers import config, logging_utils


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    for name in (
        config.TIMEOUT_ENV_VAR,
        config.POLL_INTERVAL_ENV_VAR,
        config.TIMEOUT_SCALE_ENV_VAR,
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv(logging_utils.LOG_ENV_VAR, str(tmp_path / "logs"))
