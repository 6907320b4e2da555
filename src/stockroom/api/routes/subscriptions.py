"""Subscriptions API endpoint.

GET /{namespace}/user/subscriptions - Supported, unexpired subscriptions
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from stockroom.api.dependencies import get_gateway, require_lookup_permission
from stockroom.gateway.service import StockGateway

router = APIRouter(dependencies=[Depends(require_lookup_permission)])


@router.get("/user/subscriptions")
def get_subscriptions(gateway: StockGateway = Depends(get_gateway)) -> JSONResponse:
    """List the account's subscriptions usable for licensing.

    Only subscriptions with a supported license kind that have not
    expired are returned, in vendor order.

    Returns:
        JSON array with the vendor's status code.
    """
    response = gateway.list_subscriptions()
    return JSONResponse(response.body, status_code=response.status_code)
