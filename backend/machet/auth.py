"""
Authentication for the HTTP session server.

When web.api_key (or MACHET_API_KEY) is set, every session endpoint requires
it in the X-API-Key header. With no key configured the server is open, which
is only sensible on the default loopback bind.
"""

import secrets

from fastapi import HTTPException, Request


def verify_api_key(request: Request):
    """Dependency that checks the X-API-Key header against the configured key."""
    expected = request.app.state.profile.web.api_key
    if not expected:
        return
    key = request.headers.get("x-api-key")
    if not key or not secrets.compare_digest(key, expected):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
