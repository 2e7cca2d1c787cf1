from fastapi import APIRouter

from recipe_harvester.app.api.routes import import_url

api_router = APIRouter()
api_router.include_router(import_url.router)
