"""
Главный модуль генератора - чистый интерфейс
"""

from typing import Dict, Any, Iterable, Union

from .internal.parser.openapi import OpenApiParser
from .internal.types.dialect import Dialect
from .internal.types.models import Project


class ApiModelGenerator:
    """Чистый интерфейс для построения моделей и маршрутов из OpenAPI"""

    def __init__(
        self,
        openapi_spec: Dict[str, Any],
        dialect: Union[Dialect, str] = Dialect.MYSQL,
        exclude_models: Iterable[str] = (),
    ):
        self.parser = OpenApiParser(
            openapi_spec, dialect=Dialect(dialect), exclude_models=exclude_models
        )

    def generate(self) -> Project:
        """Модели и маршруты для слоя генерации кода"""
        return self.parser.parse()


def generate_models(
    openapi_spec: Dict[str, Any],
    dialect: Union[Dialect, str] = Dialect.MYSQL,
    exclude_models: Iterable[str] = (),
) -> Project:
    generator = ApiModelGenerator(openapi_spec, dialect, exclude_models)
    return generator.generate()
