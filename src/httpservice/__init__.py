# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httpservice package entrypoint.

A thin layer over httpx that binds a keep-alive connection pool to a root URL,
merges query data into request paths and offers JSON/form POST helpers.
Responses and transport errors are passed through from httpx unchanged.
"""

from .config import ServiceSettings, load_service_settings
from .errors import ErrorCategory, categorize_exception
from .http import (
    MAX_FREE_CONNECTIONS,
    ConnectionPool,
    PoolKind,
    RequestOptions,
    attach_query_data,
    encode_query,
)
from .log import setup_logging
from .service import AsyncService, Service

__version__ = "0.1.0"

__all__ = [
    "MAX_FREE_CONNECTIONS",
    "AsyncService",
    "ConnectionPool",
    "ErrorCategory",
    "PoolKind",
    "RequestOptions",
    "Service",
    "ServiceSettings",
    "attach_query_data",
    "categorize_exception",
    "encode_query",
    "load_service_settings",
    "setup_logging",
    "__version__",
]
