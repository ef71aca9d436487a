# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Request, request

AUTHORIZATION_HEADER = "Authorization"


def extract_token(req: Request | None = None) -> str | None:
    """Return the session token carried by the ``Authorization`` header.

    Clients send the raw token as the whole header value; the standard
    ``Bearer <token>`` form is accepted as well.
    """
    req = req or request
    value = req.headers.get(AUTHORIZATION_HEADER, "").strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == "bearer":
        value = credentials.strip()
    return value or None
