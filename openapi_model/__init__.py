"""Построение моделей и маршрутов из OpenAPI 3 спецификации"""

from .generator import ApiModelGenerator, generate_models
from .internal.exceptions import (
    OpenApiModelError,
    DanglingReferenceError,
    CycleDetectedError,
    InvalidDefinitionError,
    NotSupportedError,
    MalformedPathError,
)
from .internal.types.dialect import Dialect
from .internal.types.models import (
    Attribute,
    Cardinality,
    Model,
    Project,
    Relation,
    ResponseWrapper,
    Route,
)

__all__ = [
    "ApiModelGenerator",
    "generate_models",
    "OpenApiModelError",
    "DanglingReferenceError",
    "CycleDetectedError",
    "InvalidDefinitionError",
    "NotSupportedError",
    "MalformedPathError",
    "Dialect",
    "Attribute",
    "Cardinality",
    "Model",
    "Project",
    "Relation",
    "ResponseWrapper",
    "Route",
]
