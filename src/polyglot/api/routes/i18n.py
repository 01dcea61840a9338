from typing import Annotated

from fastapi import APIRouter, Path, Request
from pydantic import BaseModel

from polyglot.api.deps import CatalogDep, LocaleDep, SettingsDep
from polyglot.core.exceptions import NotFoundError
from polyglot.i18n.translator import render
from polyglot.resp.envelope import R

router = APIRouter(prefix="/i18n", tags=["i18n"])


class LanguagesPublic(BaseModel):
    languages: list[str]
    current: str
    default: str


class MessagePublic(BaseModel):
    key: str
    locale: str
    text: str


@router.get("/languages", response_model=R[LanguagesPublic])
async def list_languages(
    catalog: CatalogDep,
    locale: LocaleDep,
    settings: SettingsDep,
) -> R[LanguagesPublic]:
    """List catalog languages and the locale negotiated for this request."""
    return R.ok(
        LanguagesPublic(
            languages=sorted(catalog.languages),
            current=locale,
            default=settings.DEFAULT_LANGUAGE,
        )
    )


@router.get("/messages/{key}", response_model=R[MessagePublic])
async def get_message(
    request: Request,
    key: Annotated[str, Path(description="Message key, usually a business code")],
    catalog: CatalogDep,
    locale: LocaleDep,
) -> R[MessagePublic]:
    """Render one catalog message in the request locale.

    Query parameters are used as placeholder values, e.g.
    ``/i18n/messages/404?resource=User``.
    """
    if catalog.has_language(locale) and catalog.get(locale, key) is None:
        raise NotFoundError("Message")
    text = render(locale, key, request.query_params.multi_items(), catalog=catalog)
    return R.ok(MessagePublic(key=key, locale=locale, text=text))
