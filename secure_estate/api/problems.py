"""RFC 7807 problem details for HTTPException responses."""

from __future__ import annotations

from fastapi import HTTPException

ERROR_TYPE_BASE = "https://secure-estate.example.com/errors"


def problem(status: int, slug: str, title: str, detail: str, instance: str) -> HTTPException:
    """Build an HTTPException carrying an RFC 7807 detail body."""
    return HTTPException(
        status_code=status,
        detail={
            "type": f"{ERROR_TYPE_BASE}/{slug}",
            "title": title,
            "status": status,
            "detail": detail,
            "instance": instance,
        },
    )
