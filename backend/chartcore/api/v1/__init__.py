"""
API v1 Router

Chart and indicator endpoints for the mobile client.
"""

from fastapi import APIRouter

from chartcore.api.v1.endpoints import chart, indicators

router = APIRouter()

# Include all endpoint routers
router.include_router(chart.router, prefix="/chart", tags=["Chart"])
router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
