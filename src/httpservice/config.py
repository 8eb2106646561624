# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for httpservice."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        return float(value) if value else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    return value if value else default


@dataclass
class ServiceSettings:
    """Client-wide defaults shared by every request a Service issues."""

    timeout: float | None = field(default_factory=lambda: _float_env("HTTPSERVICE_TIMEOUT", None))
    follow_redirects: bool = field(default_factory=lambda: _bool_env("HTTPSERVICE_FOLLOW_REDIRECTS", True))
    user_agent: str | None = field(default_factory=lambda: _str_env("HTTPSERVICE_USER_AGENT", None))


def load_service_settings() -> ServiceSettings:
    """Load service settings from environment with sensible defaults."""
    return ServiceSettings()


__all__ = ["ServiceSettings", "load_service_settings"]
