"""Routes for the /posts endpoint.

CORS headers are attached by ``cors_headers_middleware``; JSON bodies use
``JSONUTF8Response``. Only POST consumes rate limit tokens.

The POST body is decoded as JSON whatever the request's Content-Type says,
so plain ``curl -d`` and header-less clients are accepted.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.errors import MethodNotAllowedAppError
from app.core.exception_handlers import METHOD_NOT_ALLOWED_MESSAGE
from app.core.rate_limit import enforce_rate_limit
from app.core.responses import JSONUTF8Response
from app.schemas.post import ErrorResponse, PostCreateRequest, PostResponse
from app.services.post_service import PostService

router = APIRouter(tags=["Posts"], default_response_class=JSONUTF8Response)


def get_post_service(request: Request) -> PostService:
    """Return the post service owned by the running application."""
    return request.app.state.post_service


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


async def parse_post_create(request: Request) -> PostCreateRequest:
    """Decode and validate the raw request body as a ``PostCreateRequest``.

    Raises:
        RequestValidationError: Body is not JSON or does not match the schema
            (rendered as 400 "Invalid request body").
    """
    try:
        return PostCreateRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


PostCreateBody = Annotated[PostCreateRequest, Depends(parse_post_create)]

_POST_REQUEST_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": PostCreateRequest.model_json_schema()}},
    }
}


@router.options("/posts", status_code=status.HTTP_200_OK)
def posts_preflight() -> Response:
    """CORS preflight: empty 200, headers only."""
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/posts",
    response_model=list[PostResponse],
    responses={500: {"model": ErrorResponse}},
)
def list_posts(service: PostServiceDep) -> list[PostResponse]:
    """List every post, most recent first when the store tracks order.

    Returns:
        list[PostResponse]: All posts; an empty list when there are none.
    """
    return [PostResponse.from_post(post) for post in service.list_posts()]


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    openapi_extra=_POST_REQUEST_BODY,
)
def create_post(payload: PostCreateBody, service: PostServiceDep) -> PostResponse:
    """Create a post from ``{title, content}``.

    The server assigns the id and escapes both fields before storing them.

    Raises:
        ValidationAppError: Title or content empty after escaping (400).
        StorageAppError: The store rejected the insert (500).
    """
    post = service.create_post(payload.title, payload.content)
    return PostResponse.from_post(post)


@router.api_route(
    "/posts",
    methods=["PUT", "PATCH", "DELETE", "HEAD"],
    include_in_schema=False,
)
def posts_method_not_allowed(request: Request) -> None:
    raise MethodNotAllowedAppError(
        code="method_not_allowed",
        message=METHOD_NOT_ALLOWED_MESSAGE,
        details={"context": {"method": request.method}},
    )
