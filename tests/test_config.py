import pytest

from zenpowers.config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    WaitDefaults,
    load_wait_defaults,
)


def test_defaults_without_environment():
    defaults = load_wait_defaults()

    assert defaults == WaitDefaults(
        timeout=DEFAULT_TIMEOUT,
        poll_interval=DEFAULT_POLL_INTERVAL,
        timeout_scale=1.0,
    )
    assert defaults.timeout == 5.0
    assert defaults.poll_interval == 0.01


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ZENPOWERS_WAIT_TIMEOUT", "12.5")
    monkeypatch.setenv("ZENPOWERS_POLL_INTERVAL", "0.25")
    monkeypatch.setenv("ZENPOWERS_WAIT_TIMEOUT_SCALE", "2")

    defaults = load_wait_defaults()

    assert defaults.resolve_timeout(None) == 25.0
    assert defaults.resolve_timeout(1.0) == 2.0
    assert defaults.resolve_poll_interval(None) == 0.25
    assert defaults.resolve_poll_interval(0.5) == 0.5


def test_malformed_value_names_variable(monkeypatch):
    monkeypatch.setenv("ZENPOWERS_POLL_INTERVAL", "fast")

    with pytest.raises(ValueError, match="ZENPOWERS_POLL_INTERVAL must be a number"):
        load_wait_defaults()


@pytest.mark.parametrize("scale", ["0", "-1.5"])
def test_non_positive_scale_rejected(monkeypatch, scale):
    monkeypatch.setenv("ZENPOWERS_WAIT_TIMEOUT_SCALE", scale)

    with pytest.raises(ValueError, match="must be positive"):
        load_wait_defaults()


def test_blank_value_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("ZENPOWERS_WAIT_TIMEOUT", "  ")

    assert load_wait_defaults().timeout == DEFAULT_TIMEOUT


@pytest.mark.parametrize(
    "name",
    ["ZENPOWERS_WAIT_TIMEOUT", "ZENPOWERS_POLL_INTERVAL", "ZENPOWERS_WAIT_TIMEOUT_SCALE"],
)
@pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
def test_non_finite_values_rejected(monkeypatch, name, raw):
    monkeypatch.setenv(name, raw)

    with pytest.raises(ValueError, match=f"{name} must be a finite number"):
        load_wait_defaults()
