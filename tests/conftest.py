from collections.abc import Iterator

import pytest

from polyglot.i18n.catalog import Catalog, reset_catalog

EN_MESSAGES = {
    "200": "Ok",
    "400": "Request Parameter Error",
    "404": "{resource} Not Found",
    "500": "Internal Server Error",
    "902": "Illegal Parameter",
    "greet": "Hello, {name}!",
}

ZH_MESSAGES = {
    "200": "成功",
    "400": "请求参数错误",
    "404": "{resource}不存在",
    "500": "服务器内部错误",
    "902": "非法参数",
    "greet": "你好，{name}！",
}


@pytest.fixture(autouse=True)
def clean_catalog() -> Iterator[None]:
    """Every test starts and ends without a process-wide catalog."""
    reset_catalog()
    yield
    reset_catalog()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.build(
        [
            ("en", EN_MESSAGES),
            ("zh", ZH_MESSAGES),
            ("zh-CN", ZH_MESSAGES),
        ]
    )
