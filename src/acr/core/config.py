"""Runtime settings, read once from the process environment at startup."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from acr.core.errors import ConfigurationError

GEMINI_BASE_URL_DEFAULT = "https://generativelanguage.googleapis.com/v1beta"
MODEL_DEFAULT = "gemini-2.5-flash"

API_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")

# env var -> Settings field
_ENV_FIELDS = {
    "ACR_MODEL": "model",
    "ACR_BASE_URL": "base_url",
    "ACR_TEMPERATURE": "temperature",
    "ACR_MAX_OUTPUT_TOKENS": "max_output_tokens",
    "ACR_THINKING_FRACTION": "thinking_fraction",
    "ACR_TIMEOUT": "timeout",
    "ACR_LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    api_key: str = Field(..., min_length=1, repr=False)
    model: str = MODEL_DEFAULT
    base_url: str = GEMINI_BASE_URL_DEFAULT
    temperature: float = Field(0.2, ge=0.0, le=2.0)
    max_output_tokens: int = Field(8192, gt=0)
    # share of max_output_tokens reserved for the model's reasoning; 0 disables it
    thinking_fraction: float = Field(0.25, ge=0.0, lt=1.0)
    timeout: float = Field(120.0, gt=0)
    log_level: str = "INFO"

    @property
    def thinking_budget(self) -> Optional[int]:
        if self.thinking_fraction <= 0:
            return None
        return int(self.max_output_tokens * self.thinking_fraction)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    A missing API key is fatal: the caller is expected to stop before it
    accepts any input.
    """
    env = os.environ if environ is None else environ

    api_key = next((env[name].strip() for name in API_KEY_VARS if env.get(name, "").strip()), "")
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_VARS[0]} environment variable not set "
            f"(set it in the environment or in a .env file)."
        )

    values = {"api_key": api_key}
    for var, field in _ENV_FIELDS.items():
        raw = env.get(var, "").strip()
        if raw:
            values[field] = raw

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
