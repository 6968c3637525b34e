from fastapi import APIRouter
from inkwell.api.routes.content import build_content_router
from inkwell.api.routes.taxonomy import build_taxonomy_router
from inkwell.services.taxonomies import TAXONOMIES

api_router = APIRouter()

for entry in TAXONOMIES:
    api_router.include_router(build_taxonomy_router(entry))
    api_router.include_router(build_content_router(entry))
