# tests/test_config.py
import pydantic
import pytest

from household_budget.config import Settings, get_settings


@pytest.fixture()
def fresh_settings():
    """get_settings() rebuilt from the current environment, cache restored after."""
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_valid_settings():
    s = Settings(store_url="sqlite:///./x.db", store_key="k-91c2e0", token_max_age=60)
    assert s.token_max_age == 60
    assert s.session_cookie


@pytest.mark.parametrize(
    "key", ["", "   ", "changeme", "dev-secret-change", "your-store-key", "<store key>"]
)
def test_placeholder_credentials_are_rejected(key):
    with pytest.raises(pydantic.ValidationError):
        Settings(store_url="sqlite:///./x.db", store_key=key)


def test_placeholder_url_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        Settings(store_url="<store url>", store_key="k-91c2e0")


def test_token_age_must_be_positive():
    with pytest.raises(pydantic.ValidationError):
        Settings(store_url="sqlite:///./x.db", store_key="k-91c2e0", token_max_age=0)


def test_settings_are_read_from_the_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("STORE_KEY", "k-from-env-5521")
    monkeypatch.setenv("TOKEN_MAX_AGE", "120")
    s = fresh_settings()
    assert s.store_key == "k-from-env-5521"
    assert s.token_max_age == 120


@pytest.mark.parametrize("key", ["changeme", ""])
def test_placeholder_key_in_environment_fails_at_startup(monkeypatch, fresh_settings, key):
    monkeypatch.setenv("STORE_KEY", key)
    with pytest.raises(pydantic.ValidationError):
        fresh_settings()


def test_missing_key_in_environment_fails_at_startup(monkeypatch, fresh_settings):
    monkeypatch.delenv("STORE_KEY", raising=False)
    with pytest.raises(pydantic.ValidationError):
        fresh_settings()


def test_non_positive_age_in_environment_fails_at_startup(monkeypatch, fresh_settings):
    monkeypatch.setenv("TOKEN_MAX_AGE", "0")
    with pytest.raises(pydantic.ValidationError):
        fresh_settings()
