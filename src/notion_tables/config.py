"""
Configuration module for the Notion tables client.

This module centralizes the loading and validation of all configuration
parameters from environment variables. It provides a single `Settings`
class that acts as a container for all configurable values, and a small
immutable `NotionConfig` struct that is handed to the transport so the
request layer never reads global state.
"""

import os
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class NotionConfig:
    """Connection parameters passed into the transport at call time."""

    bearer_token: str
    api_version: str
    base_url: str


class Settings:
    """
    A container for all configuration settings, loaded from environment variables.

    This class centralizes configuration, providing default values for optional
    settings and raising errors for missing required settings.
    """

    # --- Notion API Configuration ---
    NOTION_TOKEN: str
    NOTION_VERSION: str
    NOTION_URL: str

    # --- Pagination ---
    PAGE_SIZE: int

    # --- Request Configuration ---
    MAX_RETRIES: int
    MAX_RETRY_BACKOFF_SECONDS: int
    REQUEST_TIMEOUT: int

    # --- Logging Configuration ---
    LOG_LEVEL: str
    LOG_FORMAT: Literal["console", "json"]
    LOG_RAW_RESPONSES: bool

    # --- Constants ---
    MAX_PAGE_SIZE: int = 100

    def __init__(self):
        """
        Loads settings from environment variables and performs validation.
        """
        # --- Notion API Configuration ---
        self.NOTION_TOKEN = self._get_required_env("NOTION_TOKEN")
        self.NOTION_VERSION = os.getenv("NOTION_VERSION", "2022-06-28")
        self.NOTION_URL = os.getenv("NOTION_URL", "https://api.notion.com/v1").rstrip(
            "/"
        )

        # --- Pagination ---
        page_size = int(os.getenv("PAGE_SIZE", self.MAX_PAGE_SIZE))
        self.PAGE_SIZE = min(self.MAX_PAGE_SIZE, max(1, page_size))

        # --- Request Configuration ---
        self.MAX_RETRIES = int(os.getenv("MAX_RETRIES", 5))
        self.MAX_RETRY_BACKOFF_SECONDS = int(os.getenv("MAX_RETRY_BACKOFF_SECONDS", 30))
        self.REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", 60))

        # --- Logging Configuration ---
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()
        if self.LOG_FORMAT not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")
        self.LOG_RAW_RESPONSES = self._get_bool_env("LOG_RAW_RESPONSES", False)

    def notion_config(self) -> NotionConfig:
        """Return the connection parameters for the transport."""
        return NotionConfig(
            bearer_token=self.NOTION_TOKEN,
            api_version=self.NOTION_VERSION,
            base_url=self.NOTION_URL,
        )

    def _get_required_env(self, var_name: str) -> str:
        """
        Gets a required environment variable, raising an error if it's not set.
        """
        value = os.getenv(var_name)
        if value is None:
            raise ValueError(f"Required environment variable '{var_name}' is not set.")
        return value

    def _get_bool_env(self, var_name: str, default: bool) -> bool:
        value = os.getenv(var_name)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")
