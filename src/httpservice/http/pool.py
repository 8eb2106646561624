# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Keep-alive connection pools bound to a service root URL."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import httpx

MAX_FREE_CONNECTIONS = 16

POOL_LIMITS = httpx.Limits(
    max_connections=None,
    max_keepalive_connections=MAX_FREE_CONNECTIONS,
)

Transport = Union[httpx.BaseTransport, httpx.AsyncBaseTransport]


class PoolKind(str, Enum):
    HTTP = "http"
    HTTPS = "https"


class SchemeMismatchTransport(httpx.BaseTransport, httpx.AsyncBaseTransport):
    """Fallback transport rejecting requests outside the pool's scheme."""

    def __init__(self, kind: PoolKind):
        self.kind = kind

    def _reject(self, request: httpx.Request) -> httpx.UnsupportedProtocol:
        return httpx.UnsupportedProtocol(
            f"Protocol \"{request.url.scheme}:\" not supported. Expected \"{self.kind.value}:\"",
            request=request,
        )

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        raise self._reject(request)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        raise self._reject(request)


def select_pool_kind(root_url: str) -> PoolKind:
    """Encrypted transport only for a literal ``https:`` prefix; everything else is plain."""
    return PoolKind.HTTPS if root_url[:6] == "https:" else PoolKind.HTTP


@dataclass(frozen=True)
class ConnectionPool:
    """A transport plus the kind of connections it was created for."""

    kind: PoolKind
    transport: Transport

    @property
    def scheme_pattern(self) -> str:
        return f"{self.kind.value}://"

    def client_kwargs(self) -> dict[str, Any]:
        """
        Route only URLs of the pool's own scheme through its transport.

        Any other scheme falls through to a transport that refuses it, the way a
        plain agent cannot carry an encrypted request and vice versa.
        """
        return {
            "transport": SchemeMismatchTransport(self.kind),
            "mounts": {self.scheme_pattern: self.transport},
        }


def create_pool(root_url: str, transport: httpx.BaseTransport | None = None) -> ConnectionPool:
    """Build the synchronous keep-alive pool for ``root_url``."""
    kind = select_pool_kind(root_url)
    return ConnectionPool(kind=kind, transport=transport or httpx.HTTPTransport(limits=POOL_LIMITS))


def create_async_pool(root_url: str, transport: httpx.AsyncBaseTransport | None = None) -> ConnectionPool:
    """Build the asyncio keep-alive pool for ``root_url``."""
    kind = select_pool_kind(root_url)
    return ConnectionPool(kind=kind, transport=transport or httpx.AsyncHTTPTransport(limits=POOL_LIMITS))


__all__ = [
    "MAX_FREE_CONNECTIONS",
    "POOL_LIMITS",
    "ConnectionPool",
    "PoolKind",
    "SchemeMismatchTransport",
    "create_async_pool",
    "create_pool",
    "select_pool_kind",
]
