from typing import Annotated

from fastapi import Depends

from polyglot.core.config import Settings, get_settings
from polyglot.i18n.catalog import Catalog, get_catalog
from polyglot.i18n.middleware import request_locale

SettingsDep = Annotated[Settings, Depends(get_settings)]
CatalogDep = Annotated[Catalog, Depends(get_catalog)]
LocaleDep = Annotated[str, Depends(request_locale)]
