"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

DEFAULT_ADE_BASE_URL = "https://api.va.landing.ai"
DEFAULT_PARSE_MODEL = "dpt-2"
DEFAULT_EXTRACT_MODEL = "extract-latest"

API_KEY_VARIABLES = ("VISION_AGENT_API_KEY", "VITE_VISION_AGENT_API_KEY")


@dataclass(slots=True)
class AppConfig:
    api_key: str = ""
    ade_base_url: str = DEFAULT_ADE_BASE_URL
    parse_model: str = DEFAULT_PARSE_MODEL
    extract_model: str = DEFAULT_EXTRACT_MODEL
    preview_chars: int = 1200

    def __post_init__(self) -> None:
        self.api_key = self.api_key.strip()
        self.ade_base_url = self.ade_base_url.strip().rstrip("/") or DEFAULT_ADE_BASE_URL
        if not self.ade_base_url.startswith(("http://", "https://")):
            raise ValueError("ADE_BASE_URL must start with http:// or https://")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        source: Mapping[str, str] = os.environ if environ is None else environ
        api_key = ""
        for name in API_KEY_VARIABLES:
            api_key = source.get(name, "").strip()
            if api_key:
                break
        return cls(
            api_key=api_key,
            ade_base_url=source.get("ADE_BASE_URL", DEFAULT_ADE_BASE_URL),
        )

    @property
    def configuration_error(self) -> str:
        """Startup-visible problem with the configuration, or an empty string."""
        if not self.api_key:
            return "VISION_AGENT_API_KEY is not configured. Please add it to your .env file."
        return ""


def load_config() -> AppConfig:
    """Resolve the process-wide configuration once, reading ``.env`` first."""
    load_dotenv()
    return AppConfig.from_env()
