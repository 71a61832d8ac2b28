from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from tinyurl_app.services.mapping_service import MappingStore
from tinyurl_app.dependencies import get_mapping_store

router = APIRouter(tags=["redirect"])


@router.get("/u/{short_code}")
async def redirect_to_long_url(
    short_code: str,
    mappings: MappingStore = Depends(get_mapping_store)
):
    """
    Redirect to the original URL.

    Public: no session is needed and ownership is not checked.
    Unknown codes fall through to the 404 error handler.
    """
    long_url = mappings.resolve_public(short_code)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
