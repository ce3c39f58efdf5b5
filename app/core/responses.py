"""Response classes shared by routes and exception handlers."""

from __future__ import annotations

from fastapi.responses import JSONResponse


class JSONUTF8Response(JSONResponse):
    """JSON response declaring its charset explicitly.

    Starlette only appends ``charset`` to ``text/*`` media types, so the
    charset is spelled out here.
    """

    media_type = "application/json; charset=utf-8"
