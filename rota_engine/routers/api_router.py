from fastapi import APIRouter
from rota_engine.routers import calendar, rota, leave

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(calendar.router, tags=["Calendar"])
api_router.include_router(rota.router, tags=["Rota"])
api_router.include_router(leave.router, tags=["Leave"])
