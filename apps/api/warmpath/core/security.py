from __future__ import annotations

import hmac

from fastapi import Depends, Header, HTTPException, status

from warmpath.core.config import Settings, get_settings


def verify_webhook_secret(settings: Settings, secret_header: str | None) -> None:
    if not settings.webhook_secret:
        return
    if not secret_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing webhook secret",
        )
    if not hmac.compare_digest(secret_header, settings.webhook_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret",
        )


def webhook_secret_header(
    x_webhook_secret: str | None = Header(default=None),
    x_mv_signature: str | None = Header(default=None),
) -> str | None:
    # Edge functions still send the older signature header.
    return x_webhook_secret or x_mv_signature


def require_webhook_secret(
    settings: Settings = Depends(get_settings),
    secret_header: str | None = Depends(webhook_secret_header),
) -> None:
    verify_webhook_secret(settings, secret_header)
