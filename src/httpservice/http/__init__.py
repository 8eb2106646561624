# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP building blocks exports."""

from .models import POOL_OPTION_KEYS, Body, Headers, RequestOptions
from .pool import (
    MAX_FREE_CONNECTIONS,
    ConnectionPool,
    PoolKind,
    create_async_pool,
    create_pool,
    select_pool_kind,
)
from .query import QueryData, attach_query_data, encode_query
from .url import resolve_url

__all__ = [
    "MAX_FREE_CONNECTIONS",
    "POOL_OPTION_KEYS",
    "Body",
    "ConnectionPool",
    "Headers",
    "PoolKind",
    "QueryData",
    "RequestOptions",
    "attach_query_data",
    "create_async_pool",
    "create_pool",
    "encode_query",
    "resolve_url",
    "select_pool_kind",
]
