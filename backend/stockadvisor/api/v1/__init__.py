"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from stockadvisor.api.v1.endpoints import analysis, recommendations

router = APIRouter()

# Include all endpoint routers
router.include_router(analysis.router, prefix="/analysis", tags=["Technical Analysis"])
router.include_router(recommendations.router, prefix="/recommendations", tags=["Recommendations"])
