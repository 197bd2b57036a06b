"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from brokerbook.presentation.api.v1.endpoints.customers import router as customers_router
from brokerbook.presentation.api.v1.endpoints.health import router as health_router
from brokerbook.presentation.api.v1.endpoints.properties import router as properties_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(customers_router)
router.include_router(properties_router)
