from fastapi import APIRouter

from crewplan.api.routes import placement

api_router = APIRouter()

# Placement engine routes
api_router.include_router(placement.router)
