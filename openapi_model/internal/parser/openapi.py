import logging
from typing import Dict, Any, Iterable, Optional

from ..types.dialect import Dialect
from ..types.models import Project
from ..generator.model_extractor import ModelExtractor
from ..generator.route_inference import RouteInference
from .references import ReferenceResolver

logger = logging.getLogger(__name__)


class OpenApiParser:
    """Парсер OpenAPI спецификации в модели и маршруты"""

    def __init__(
        self,
        openapi_dict: Dict[str, Any],
        dialect: Dialect = Dialect.MYSQL,
        exclude_models: Iterable[str] = (),
        known_model_classes: Optional[Dict[str, str]] = None,
    ):
        self.openapi_dict = openapi_dict
        self.dialect = dialect
        self.exclude_models = list(exclude_models)
        self.known_model_classes = dict(known_model_classes or {})
        self.resolved_model_classes: Dict[str, str] = {}

    def parse(self) -> Project:
        """Один прогон: свой резолвер ссылок, модели, затем маршруты"""
        resolver = ReferenceResolver(self.openapi_dict)

        models = ModelExtractor(
            self.openapi_dict,
            self.dialect,
            resolver=resolver,
            exclude_models=self.exclude_models,
        ).extract()

        routes, self.resolved_model_classes = RouteInference(
            self.openapi_dict, resolver=resolver
        ).infer(self.known_model_classes)

        title = (self.openapi_dict.get("info") or {}).get("title") or "api"
        logger.info(f"Parsed {title}: {len(models)} models, {len(routes)} routes")

        return Project(
            name=title, dialect=self.dialect, models=models, routes=routes
        )
