from fastapi import APIRouter

from .business import business_router
from .health import health_router
from .mpesa import mpesa_router
from .realtime import realtime_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(realtime_router, tags=["Realtime"])
router.include_router(mpesa_router, tags=["M-Pesa"])
router.include_router(business_router, tags=["Business"])
