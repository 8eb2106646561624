# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Query string and form body encoding.

Both use application/x-www-form-urlencoded rules; spaces encode as ``+``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Union
from urllib.parse import urlencode

QueryValue = Union[str, int, float, bool, None, Sequence[Any]]
QueryData = Mapping[str, QueryValue]


def _stringify_value(value: Any) -> str:
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        # Integral floats render without a fractional part, e.g. 1.0 -> "1".
        return str(int(value)) if value.is_integer() and abs(value) < 1e21 else repr(value)
    return str(value)


def encode_query(data: QueryData | None) -> str:
    """
    Encode a mapping as ``k=v&k2=v2``.

    Sequence values repeat the key once per item; an empty sequence contributes nothing.
    None, non-finite floats, mappings and nested sequences encode as an empty value.
    """
    if not data:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), _stringify_value(item)) for item in value)
        else:
            pairs.append((str(key), _stringify_value(value)))
    return urlencode(pairs)


def attach_query_data(path: str, query_data: QueryData | None) -> str:
    """
    Take a url path part and attach a query string to it.

    If the path already contains ``?`` anywhere the new parameters are joined
    with ``&``, even when nothing follows the ``?``.
    """
    query_string = encode_query(query_data)
    if not query_string:
        return path

    join_char = "&" if "?" in path else "?"
    return path + join_char + query_string


__all__ = ["QueryData", "QueryValue", "attach_query_data", "encode_query"]
