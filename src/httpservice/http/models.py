# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request option models used by Service implementations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

Headers = Dict[str, str]
Body = Union[str, bytes, Iterable[bytes]]

# Keys that would let a caller substitute its own connection pool.
POOL_OPTION_KEYS = frozenset({"agent", "pool", "transport", "mounts"})

_NAMED_FIELDS = ("method", "headers", "body", "timeout", "follow_redirects")


def without_pool_keys(values: Mapping[str, Any]) -> dict[str, Any]:
    dropped = sorted(key for key in values if key in POOL_OPTION_KEYS)
    if dropped:
        logger.debug("Ignoring caller-supplied pool options: %s", ", ".join(dropped))
    return {key: value for key, value in values.items() if key not in POOL_OPTION_KEYS}


@dataclass
class RequestOptions:
    """
    Per-call request descriptor.

    ``extra`` carries any further httpx ``Client.request`` keyword (``cookies``,
    ``extensions``, ...). There is no pool field: the owning
    service always dispatches through its own pool.
    """

    method: Optional[str] = None
    headers: Optional[Headers] = None
    body: Optional[Body] = None
    timeout: Optional[float] = None
    follow_redirects: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.extra = without_pool_keys(self.extra)

    @property
    def effective_method(self) -> str:
        return (self.method or "GET").upper()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RequestOptions":
        """Normalize a dictionary of fetch-style options."""
        values = without_pool_keys(data)
        return cls(
            method=values.get("method"),
            headers=dict(values["headers"]) if values.get("headers") else None,
            body=values.get("body"),
            timeout=values.get("timeout"),
            follow_redirects=values.get("follow_redirects"),
            extra={k: v for k, v in values.items() if k not in _NAMED_FIELDS},
        )

    @classmethod
    def coerce(cls, options: "RequestOptions | Mapping[str, Any] | None") -> "RequestOptions":
        if options is None:
            return cls()
        if isinstance(options, RequestOptions):
            return options
        return cls.from_mapping(options)


__all__ = ["Body", "Headers", "POOL_OPTION_KEYS", "RequestOptions", "without_pool_keys"]
