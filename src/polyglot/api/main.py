from fastapi import APIRouter

from polyglot.api.routes import i18n

api_router = APIRouter()
api_router.include_router(i18n.router)
