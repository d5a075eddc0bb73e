"""Analyzer settings with environment overrides."""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


ENV_FIELDS: Dict[str, str] = {
	"FLOWSCOPE_API_BASE_URL": "api_base_url",
	"FLOWSCOPE_USER_AGENT": "user_agent",
	"GITHUB_TOKEN": "token",
	"FLOWSCOPE_TIMEOUT": "timeout",
	"FLOWSCOPE_MAX_RETRIES": "max_retries",
	"FLOWSCOPE_RETRY_BASE_DELAY": "retry_base_delay",
	"FLOWSCOPE_FALLBACK": "fallback_enabled",
}


class Settings(BaseModel):
	api_base_url: str = Field(default="https://api.github.com")
	accept_header: str = Field(default="application/vnd.github.v3+json")
	user_agent: str = Field(default="Flowscope-Analyzer")
	token: Optional[str] = None
	timeout: float = Field(default=30.0, gt=0)
	max_retries: int = Field(default=2, ge=0, description="Additional attempts after the first")
	retry_base_delay: float = Field(default=1.0, ge=0, description="Seconds; attempt n waits n times this")
	fallback_enabled: bool = True


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> Settings:
	"""Build settings from defaults, then environment, then explicit overrides.

	Args:
		environ: Mapping to read instead of ``os.environ``
		overrides: Field values that win over the environment

	Returns:
		Validated settings

	Raises:
		ConfigError: If an environment value does not validate
	"""
	env = os.environ if environ is None else environ
	values: Dict[str, Any] = {}
	for env_name, field_name in ENV_FIELDS.items():
		raw = env.get(env_name)
		if raw is not None and raw != "":
			values[field_name] = raw
	values.update({k: v for k, v in overrides.items() if v is not None})

	try:
		return Settings(**values)
	except ValidationError as e:
		raise ConfigError(f"Invalid flowscope settings: {e}") from e
