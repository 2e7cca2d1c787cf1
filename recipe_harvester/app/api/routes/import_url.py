from fastapi import APIRouter
from pydantic import BaseModel

from recipe_harvester.app.services import url_recipe_parser
from recipe_harvester.app.services.url_parsing.models import RecipeDraft

router = APIRouter(prefix="/recipes/import", tags=["import"])


class ImportUrlRequest(BaseModel):
    url: str


@router.post("/url", response_model=RecipeDraft)
async def import_from_url(payload: ImportUrlRequest):
    return await url_recipe_parser.extract(payload.url)
