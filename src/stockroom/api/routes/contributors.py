"""Contributors API endpoint.

GET /{namespace}/contributor/{contributor_id} - Contributor details
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from stockroom.api.dependencies import get_gateway, require_lookup_permission
from stockroom.core.sanitize import sanitize_text_field
from stockroom.gateway.service import StockGateway

router = APIRouter(dependencies=[Depends(require_lookup_permission)])


@router.get("/contributor/{contributor_id}")
def get_contributor_details(
    contributor_id: str = Path(pattern=r"^\d+$"),
    gateway: StockGateway = Depends(get_gateway),
) -> JSONResponse:
    """Vendor contributor record, passed through unchanged."""
    response = gateway.contributor_details(sanitize_text_field(contributor_id))
    return JSONResponse(response.body, status_code=response.status_code)
