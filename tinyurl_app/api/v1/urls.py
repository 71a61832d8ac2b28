from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from tinyurl_app.schemas.url import URLCreate, URLUpdate, URLResponse
from tinyurl_app.services.mapping_service import MappingStore
from tinyurl_app.dependencies import get_current_account_id, get_mapping_store

router = APIRouter(prefix="/urls", tags=["urls"])


@router.get("/", response_model=List[URLResponse])
async def list_my_urls(
    account_id: Optional[str] = Depends(get_current_account_id),
    mappings: MappingStore = Depends(get_mapping_store)
):
    """List the short URLs owned by the logged-in account"""
    return mappings.list_owned(account_id)


@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    account_id: Optional[str] = Depends(get_current_account_id),
    mappings: MappingStore = Depends(get_mapping_store)
):
    """Create a new short URL owned by the logged-in account"""
    return mappings.create(account_id, url_data.long_url)


@router.get("/{short_code}", response_model=URLResponse)
async def get_url_info(
    short_code: str,
    account_id: Optional[str] = Depends(get_current_account_id),
    mappings: MappingStore = Depends(get_mapping_store)
):
    """Show one short URL (owner only)"""
    return mappings.get(short_code, account_id)


@router.put("/{short_code}", response_model=URLResponse)
async def update_url(
    short_code: str,
    url_data: URLUpdate,
    account_id: Optional[str] = Depends(get_current_account_id),
    mappings: MappingStore = Depends(get_mapping_store)
):
    """Point a short URL at a new long URL (owner only)"""
    return mappings.update(short_code, account_id, url_data.long_url)


@router.delete("/{short_code}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_url(
    short_code: str,
    account_id: Optional[str] = Depends(get_current_account_id),
    mappings: MappingStore = Depends(get_mapping_store)
):
    """Delete a short URL (owner only)"""
    mappings.delete(short_code, account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
