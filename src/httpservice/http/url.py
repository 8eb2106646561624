# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers."""

from __future__ import annotations

from urllib.parse import urljoin


def resolve_url(root_url: str, path: str) -> str:
    """
    Resolve ``path`` against ``root_url`` with standard relative-reference rules.

    Example:
      http://host/api/v1 + users  -> http://host/api/users
      http://host/api/v1 + /users -> http://host/users

    ``..`` segments and absolute URLs may leave the root's path prefix.
    """
    return urljoin(root_url, path)


__all__ = ["resolve_url"]
