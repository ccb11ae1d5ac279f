"""API routes implementation."""

from fastapi import APIRouter, Request, HTTPException, Response, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    LinkResponse,
    LinkListResponse,
    SweepResponse,
    StatisticsResponse,
    HealthResponse,
    ErrorResponse,
)
from ...lib.errors import AliasTaken, InvalidAlias, InvalidUrl, PersistenceError
from ...lib.common.url_builder import request_base_url

router = APIRouter()

STORAGE_ERROR_RESPONSE = {500: {"model": ErrorResponse, "description": "Storage failure"}}


def storage_error(e: PersistenceError, action: str) -> HTTPException:
    """Map a store failure to a 500 with a readable detail."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(e)}",
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or alias"},
        409: {"model": ErrorResponse, "description": "Alias already in use"},
        **STORAGE_ERROR_RESPONSE,
    },
    summary="Create short link",
    description="Shorten a URL. Optionally provide a custom alias.",
)
async def create_link(request: Request, body: ShortenRequest):
    """Create a short link."""
    registry = request.app.state.registry
    config = request.app.state.config

    base_url = request_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )

    try:
        record = await registry.create_link(
            original_url=body.url,
            custom_alias=body.custom_alias,
            base_url=base_url,
        )
    except AliasTaken as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (InvalidUrl, InvalidAlias) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceError as e:
        raise storage_error(e, "save URL data")

    return LinkResponse.from_record(record, expired=False)


@router.get(
    "/links",
    response_model=LinkListResponse,
    responses=STORAGE_ERROR_RESPONSE,
    summary="List short links",
    description="List all stored links, newest first.",
)
async def list_links(request: Request):
    """List short links."""
    registry = request.app.state.registry

    try:
        records = await registry.list_links()
    except PersistenceError as e:
        raise storage_error(e, "load URL data")

    records.sort(key=lambda record: record.created_at, reverse=True)

    return LinkListResponse(
        count=len(records),
        links=[LinkResponse.from_record(r, registry.is_expired(r)) for r in records],
    )


@router.post(
    "/links/sweep",
    response_model=SweepResponse,
    responses=STORAGE_ERROR_RESPONSE,
    summary="Remove expired links",
)
async def sweep_links(request: Request):
    """Remove every expired link."""
    registry = request.app.state.registry

    try:
        removed = await registry.sweep_expired()
    except PersistenceError as e:
        raise storage_error(e, "remove expired links")

    return SweepResponse(removed=removed)


@router.get(
    "/links/{link_id}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Link not found"},
        **STORAGE_ERROR_RESPONSE,
    },
    summary="Get short link",
    description="Get a short link including its click count.",
)
async def get_link(request: Request, link_id: str):
    """Get a short link."""
    registry = request.app.state.registry

    try:
        record = await registry.resolve(link_id)
    except PersistenceError as e:
        raise storage_error(e, "load URL data")

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short link '{link_id}' not found",
        )

    return LinkResponse.from_record(record, registry.is_expired(record))


@router.delete(
    "/links/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Link not found"},
        **STORAGE_ERROR_RESPONSE,
    },
    summary="Delete short link",
)
async def delete_link(request: Request, link_id: str):
    """Delete a short link."""
    registry = request.app.state.registry

    try:
        deleted = await registry.delete_link(link_id)
    except PersistenceError as e:
        raise storage_error(e, "delete link")

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short link '{link_id}' not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    responses=STORAGE_ERROR_RESPONSE,
    summary="Get statistics",
    description="Totals and the most clicked links.",
)
async def get_statistics(request: Request):
    """Get registry statistics."""
    registry = request.app.state.registry

    try:
        stats = await registry.get_statistics()
    except PersistenceError as e:
        raise storage_error(e, "load URL data")

    return StatisticsResponse(
        total_links=stats["total_links"],
        active_links=stats["active_links"],
        expired_links=stats["expired_links"],
        total_clicks=stats["total_clicks"],
        top_links=[
            LinkResponse.from_record(r, registry.is_expired(r)) for r in stats["top_links"]
        ],
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the link store is usable.",
)
async def health_check(request: Request):
    """Health check endpoint."""
    registry = request.app.state.registry

    health = await registry.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store="healthy" if health["store"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
