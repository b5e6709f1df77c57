import os  # lets us read environment variables (from the OS)
from functools import (
    lru_cache,  # one Settings object per process
)

from dotenv import load_dotenv  # loads variables from a local .env file
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()  # read .env and put those key=value pairs into environment variables

# Values people paste from examples and forget to replace.
_PLACEHOLDERS = {"", "changeme", "change-me", "dev-secret-change", "secret", "xxx"}


def _env(name: str, default: str = ""):
    """Read ``name`` when Settings is built, not when this module is imported."""
    return Field(default_factory=lambda: os.getenv(name, default))


def _is_placeholder(value: str) -> bool:
    v = value.strip().lower()
    return (
        v in _PLACEHOLDERS
        or v.startswith("your-")
        or v.startswith("your_")
        or (v.startswith("<") and v.endswith(">"))
    )


class Settings(BaseModel):  # typed container for config values
    # env-derived defaults go through the same validators as explicit values
    model_config = ConfigDict(validate_default=True)

    # connection string of the backing store (the "remote" side)
    # change effect: point the app at a different database
    store_url: str = _env("STORE_URL", "sqlite:///./household_budget.db")

    # backend credential; signs auth tokens and password-reset links
    # change effect: every issued token becomes invalid
    store_key: str = _env("STORE_KEY")

    # lifetime of an auth token in seconds; expired tokens mean "session expired"
    token_max_age: int = _env("TOKEN_MAX_AGE", "3600")

    # the cookie name used to store the browser session
    # change effect: renames the cookie; users will be logged out on rename
    session_cookie: str = _env("SESSION_COOKIE_NAME", "hb_session")

    # browser session lifetime in seconds; idle workspaces are dropped after it
    session_max_age: int = _env("SESSION_MAX_AGE", "1800")

    log_level: str = _env("LOG_LEVEL", "INFO")

    @field_validator("store_url", "store_key")
    @classmethod
    def _reject_placeholders(cls, value: str) -> str:
        if _is_placeholder(value):
            raise ValueError("backend connection setting is missing or a placeholder")
        return value

    @field_validator("token_max_age", "session_max_age")
    @classmethod
    def _positive_age(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number of seconds")
        return value


@lru_cache  # built once; endpoint + credential stay constant for the process
def get_settings() -> Settings:
    return Settings()  # raises pydantic.ValidationError on bad values
