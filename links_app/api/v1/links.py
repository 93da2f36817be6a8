import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from links_app.dependencies import get_link_service
from links_app.schemas.link import (
    ErrorResponse,
    ExportResponse,
    LinkCreate,
    LinkDelete,
    LinkResponse,
)
from links_app.services.errors import InvalidIdError, InvalidLinkError, LinkError, LinkNotFoundError
from links_app.services.link_service import LinkService
from links_app.shared.either import Either, is_right, unwrap_either

logger = logging.getLogger(__name__)

router = APIRouter(tags=["links"])

ERROR_STATUS = {
    InvalidLinkError: status.HTTP_400_BAD_REQUEST,
    InvalidIdError: status.HTTP_400_BAD_REQUEST,
    LinkNotFoundError: status.HTTP_404_NOT_FOUND,
}


def unwrap_or_raise(result: Either):
    """Return the Right value, or turn the Left error into an HTTPException."""
    value = unwrap_either(result)
    if is_right(result):
        return value
    
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(value, error_type):
            raise HTTPException(status_code=status_code, detail=value.message)
    if isinstance(value, LinkError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=value.message)
    raise TypeError(f"Unexpected error value: {value!r}")


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_link(
    link_data: LinkCreate,
    link_service: LinkService = Depends(get_link_service)
):
    """Create a new shortened link"""
    result = await link_service.create_link(link_data.url, link_data.short_url)
    return unwrap_or_raise(result)


@router.get("/links", response_model=List[LinkResponse])
async def get_links(link_service: LinkService = Depends(get_link_service)):
    """List all links, newest first"""
    return unwrap_or_raise(await link_service.get_links())


@router.get(
    "/link/{short_url}",
    response_model=LinkResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_link_by_short_url(
    short_url: str,
    link_service: LinkService = Depends(get_link_service)
):
    """Resolve an alias (counts one access)"""
    return unwrap_or_raise(await link_service.get_link_by_short_url(short_url))


@router.delete(
    "/link",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_link(
    link_data: LinkDelete,
    link_service: LinkService = Depends(get_link_service)
):
    """Delete a link by id"""
    unwrap_or_raise(await link_service.delete_link(link_data.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/links/export", response_model=ExportResponse, tags=["export"])
async def export_links(link_service: LinkService = Depends(get_link_service)):
    """
    Export all links as a CSV report.
    
    The report is streamed to object storage while it is being generated;
    the response carries its public URL.
    """
    return unwrap_or_raise(await link_service.export_links())
