# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Generic HTTP services with a managed keep-alive connection pool."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from typing import Any, Generic, TypeVar

import httpx

from .config import ServiceSettings, load_service_settings
from .errors import categorize_exception
from .http.models import RequestOptions, without_pool_keys
from .http.pool import ConnectionPool, create_async_pool, create_pool
from .http.query import QueryData, attach_query_data, encode_query
from .http.url import resolve_url

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT")

_RESERVED_KWARGS = ("method", "url")


def json_options(payload: Any) -> RequestOptions:
    """POST options carrying ``payload`` as compact JSON."""
    return RequestOptions(
        method="POST",
        body=json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )


def form_options(payload: QueryData) -> RequestOptions:
    """POST options carrying ``payload`` as a urlencoded form."""
    return RequestOptions(
        method="POST",
        body=encode_query(payload),
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


class _BaseService(ABC, Generic[ResponseT]):
    """Shared request composition for the sync and async services."""

    pool: ConnectionPool

    def __init__(self, root_url: str, settings: ServiceSettings | None = None):
        # Root url prepended to all paths; has to include the protocol, e.g. http://foobar.com
        self.root_url = root_url
        self.settings = settings or load_service_settings()

    @abstractmethod
    def request(
        self,
        path: str,
        query_data: QueryData | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> ResponseT: ...

    def post_json(self, path: str, query_data: QueryData | None, payload: Any) -> ResponseT:
        """Make a POST request to the service with a JSON payload."""
        return self.request(path, query_data, json_options(payload))

    def post_form(self, path: str, query_data: QueryData | None, payload: QueryData) -> ResponseT:
        """Make a POST request to the service with a form data payload."""
        return self.request(path, query_data, form_options(payload))

    def _client_kwargs(self) -> dict[str, Any]:
        headers = {"User-Agent": self.settings.user_agent} if self.settings.user_agent else None
        return {
            **self.pool.client_kwargs(),
            "timeout": self.settings.timeout,
            "follow_redirects": self.settings.follow_redirects,
            "headers": headers,
        }

    def _prepare(
        self,
        path: str,
        query_data: QueryData | None,
        options: RequestOptions | Mapping[str, Any] | None,
    ) -> tuple[str, str, dict[str, Any]]:
        path_with_data = attach_query_data(path, query_data)
        opts = RequestOptions.coerce(options)
        url = resolve_url(self.root_url, path_with_data)
        method = opts.effective_method

        logger.info("Outgoing request: %s %s", method, url)

        kwargs = {key: value for key, value in without_pool_keys(opts.extra).items() if key not in _RESERVED_KWARGS}
        kwargs["headers"] = opts.headers
        if opts.body is not None:
            kwargs["content"] = opts.body
        if opts.timeout is not None:
            kwargs["timeout"] = opts.timeout
        if opts.follow_redirects is not None:
            kwargs["follow_redirects"] = opts.follow_redirects
        return method, url, kwargs

    @staticmethod
    def _log_failure(method: str, url: str, exc: BaseException) -> None:
        logger.debug(
            "Outgoing request failed: %s %s (%s: %s)",
            method,
            url,
            categorize_exception(exc).value,
            exc,
        )


class Service(_BaseService[httpx.Response]):
    """
    A generic HTTP service backed by a synchronous httpx client.

    Every request resolves against ``root_url`` and is dispatched through the
    service's own pool; the ``httpx.Response`` is returned untouched and
    transport errors propagate unchanged.
    """

    def __init__(
        self,
        root_url: str,
        settings: ServiceSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(root_url, settings)
        self.pool = create_pool(root_url, transport)
        self._client = httpx.Client(**self._client_kwargs())

    def request(
        self,
        path: str,
        query_data: QueryData | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Make a request to the service, GET method by default."""
        method, url, kwargs = self._prepare(path, query_data, options)
        try:
            return self._client.request(method, url, **kwargs)
        except Exception as exc:
            self._log_failure(method, url, exc)
            raise

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Service":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


class AsyncService(_BaseService[Awaitable[httpx.Response]]):
    """
    asyncio variant of Service.

    ``request`` composes and resolves the URL immediately, so resolution and
    serialization errors raise at call time; the returned awaitable performs
    the dispatch and raises transport errors when awaited.
    """

    def __init__(
        self,
        root_url: str,
        settings: ServiceSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(root_url, settings)
        self.pool = create_async_pool(root_url, transport)
        self._client = httpx.AsyncClient(**self._client_kwargs())

    def request(
        self,
        path: str,
        query_data: QueryData | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> Awaitable[httpx.Response]:
        method, url, kwargs = self._prepare(path, query_data, options)
        return self._dispatch(method, url, kwargs)

    async def _dispatch(self, method: str, url: str, kwargs: dict[str, Any]) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except Exception as exc:
            self._log_failure(method, url, exc)
            raise

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()


__all__ = ["AsyncService", "Service", "form_options", "json_options"]
