"""Storefront client settings, read from the environment."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class StorefrontSettings:
    api_url: str = "http://localhost:8000"
    api_key: str = ""
    state_dir: str = ".storefront"
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "StorefrontSettings":
        return cls(
            api_url=os.environ.get("STOREFRONT_API_URL", cls.api_url),
            api_key=os.environ.get("STOREFRONT_API_KEY", cls.api_key),
            state_dir=os.environ.get("STOREFRONT_STATE_DIR", cls.state_dir),
            timeout=float(os.environ.get("STOREFRONT_TIMEOUT", cls.timeout)),
        )
