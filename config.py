# config.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:8090"


@dataclass
class Settings:
    base_url: str
    token: Optional[str]
    timeout_seconds: int
    max_retries: int


def get_settings() -> Settings:
    """
    Read API settings from the environment (and .env, if present).

      DAIRY_API_BASE_URL   order-query service root
      DAIRY_API_TOKEN      optional bearer token
      DAIRY_API_TIMEOUT    request timeout in seconds
      DAIRY_API_RETRIES    attempts per GET request
    """
    load_dotenv()
    return Settings(
        base_url=os.getenv("DAIRY_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        token=os.getenv("DAIRY_API_TOKEN") or None,
        timeout_seconds=int(os.getenv("DAIRY_API_TIMEOUT", "10")),
        max_retries=max(1, int(os.getenv("DAIRY_API_RETRIES", "3"))),
    )
