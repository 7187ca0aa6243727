"""
API routes for the pro forma engine.
"""

from fastapi import APIRouter

from propfolio.api import calculations, proforma

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(proforma.router, prefix="/calculate", tags=["proforma"])
