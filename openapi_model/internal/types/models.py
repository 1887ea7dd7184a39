from enum import Enum
from typing import Optional, Any, Dict, List, Union
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator

from .dialect import Dialect


ARRAY_MARKER = "[]"


class Cardinality(str, Enum):
    TO_ONE = "toOne"
    TO_MANY = "toMany"


class Limits(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    min_length: Optional[int] = None


class ColumnSchema(BaseModel):
    """Описание колонки таблицы для генератора миграций"""

    name: str
    php_type: str
    db_type: str
    type: str
    allow_null: bool
    size: Optional[int] = None
    is_primary_key: bool = False
    auto_increment: bool = False
    default_value: Any = None
    has_default: bool = False
    enum_values: Optional[List[Any]] = None


class Attribute(BaseModel):
    """Свойство модели с семантическим и физическим типом"""

    model_config = ConfigDict(frozen=True)

    property_name: str
    column_name: str

    php_type: str = "string"
    db_type: str = "string"
    abstract_type: str = "string"
    x_db_type: Union[str, bool, None] = None

    nullable: Optional[bool] = None
    allow_null: bool = True
    required: bool = False
    read_only: bool = False

    description: str = ""
    reference: Optional[str] = None

    size: Optional[int] = None
    limits: Limits = Limits()
    enum_values: Optional[List[Any]] = None

    default_value: Any = None
    has_default: bool = False

    primary: bool = False
    auto_increment: bool = False
    virtual: bool = False

    @property
    def is_reference(self) -> bool:
        return self.reference is not None

    @property
    def is_array(self) -> bool:
        return self.php_type.endswith(ARRAY_MARKER)

    @property
    def max_length(self) -> Optional[int]:
        return self.size

    @property
    def min_length(self) -> Optional[int]:
        return self.limits.min_length

    @property
    def camel_name(self) -> str:
        return "".join(
            part[:1].upper() + part[1:]
            for part in self.property_name.replace("-", "_").split("_")
            if part
        )

    @property
    def formatted_description(self) -> str:
        """Строка для docblock модели: тип, колонка и описание"""
        comment = f"{self.column_name} {self.description}".rstrip()
        return f"{self.php_type} ${comment}".replace("\n", "\n * ")

    def to_column_schema(self) -> ColumnSchema:
        return ColumnSchema(
            name=self.column_name,
            php_type=self.php_type,
            db_type=self.db_type.lower(),
            type=self.abstract_type,
            allow_null=self.allow_null,
            size=self.size,
            is_primary_key=self.primary,
            auto_increment=self.auto_increment,
            default_value=self.default_value,
            has_default=self.has_default,
            enum_values=self.enum_values,
        )


class Relation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    class_name: str
    cardinality: Cardinality
    link: Dict[str, str]

    @property
    def is_to_many(self) -> bool:
        return self.cardinality is Cardinality.TO_MANY


class Model(BaseModel):
    name: str
    table_name: str
    description: str = ""

    attributes: List[Attribute] = []
    relations: Dict[str, Relation] = {}

    @field_validator("description", mode="before")
    def description_check(cls, value):
        return value or ""

    @property
    def primary_key(self) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.primary:
                return attribute
        return None

    def get_attribute(self, property_name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.property_name == property_name:
                return attribute
        return None

    def column_names(self) -> List[str]:
        return [attribute.column_name for attribute in self.attributes]


class ResponseWrapper(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_key: Optional[str] = None
    items_key: Optional[str] = None


class Route(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    path: str
    method: str
    pattern: str
    route: str

    path_params: List[str] = []
    action_params: Dict[str, Optional[Dict[str, Any]]] = {}

    model_class: Optional[str] = None
    response_wrapper: Optional[ResponseWrapper] = None

    @property
    def controller_id(self) -> str:
        return self.route.split("/", 1)[0]

    @property
    def action_id(self) -> str:
        return self.route.split("/", 1)[1]


class Project(BaseModel):
    name: str
    dialect: Dialect

    models: List[Model] = []
    routes: List[Route] = []

    def get_model(self, name: str) -> Optional[Model]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def url_rules(self) -> Dict[str, str]:
        """Правила URL: "METHOD pattern" -> controller/action"""
        return {f"{route.method} {route.pattern}": route.route for route in self.routes}

    def controllers(self) -> Dict[str, List[Dict[str, Any]]]:
        """Группировка маршрутов по контроллерам в порядке объявления"""
        controllers: Dict[str, List[Dict[str, Any]]] = {}

        for route in self.routes:
            controllers.setdefault(route.controller_id, []).append(
                {
                    "id": route.action_id,
                    "params": list(route.action_params),
                    "model_class": route.model_class,
                    "response_wrapper": route.response_wrapper,
                }
            )

        return controllers


@dataclass(frozen=True)
class ScalarProperty:
    """Обычное свойство - становится колонкой"""

    schema: Dict[str, Any]


@dataclass(frozen=True)
class ToOneProperty:
    """Прямая ссылка на другую модель"""

    target: str


@dataclass(frozen=True)
class ToManyProperty:
    """Массив ссылок на другую модель"""

    target: str


PropertyKind = Union[ScalarProperty, ToOneProperty, ToManyProperty]
