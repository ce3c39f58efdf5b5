"""Root and catch-all route.

Any path no other router claims gets the welcome text. Include this router
last so ``/posts`` and ``/health`` match first.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Root"])

WELCOME_MESSAGE = "Welcome to the Bulletin Board API! Please use the /posts endpoint."

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/", methods=ANY_METHOD, response_class=PlainTextResponse)
@router.api_route(
    "/{path:path}",
    methods=ANY_METHOD,
    response_class=PlainTextResponse,
    include_in_schema=False,
)
def root(response: Response) -> str:
    """Welcome message, whatever the method or path."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    return WELCOME_MESSAGE
