from fastapi import APIRouter
from api.v1.routes.notifications import router as notifications_router
from api.v1.routes.metrics import router as metrics_router


router = APIRouter()
router.include_router(notifications_router)
router.include_router(metrics_router)
