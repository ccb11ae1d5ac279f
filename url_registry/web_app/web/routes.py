"""Redirect handler for short links."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

from ...lib.errors import LinkExpired, LinkNotFound, PersistenceError

router = APIRouter()


@router.get("/{link_id}", include_in_schema=False)
async def redirect_to_url(request: Request, link_id: str):
    """Redirect to the original URL and count the click."""
    registry = request.app.state.registry

    try:
        record = await registry.follow_link(link_id)
    except LinkNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except LinkExpired as e:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load URL data: {str(e)}",
        )

    # 302 so every visit comes back here and is counted
    return RedirectResponse(url=record.original_url, status_code=status.HTTP_302_FOUND)
