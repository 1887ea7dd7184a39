import logging
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import InvalidDefinitionError
from ..parser.references import ReferenceResolver, is_reference, schema_name
from ..types.dialect import Dialect
from ..types.models import (
    Attribute,
    Cardinality,
    Model,
    PropertyKind,
    Relation,
    ScalarProperty,
    ToManyProperty,
    ToOneProperty,
)
from ..utils.naming import snake_case, table_name
from .attribute_builder import AttributeBuilder, get_schema_type

logger = logging.getLogger(__name__)

X_PK = "x-pk"
DEFAULT_PK = "id"


class ModelExtractor:
    """Построение моделей из components/schemas"""

    def __init__(
        self,
        openapi_dict: Dict[str, Any],
        dialect: Dialect,
        resolver: ReferenceResolver = None,
        exclude_models: Iterable[str] = (),
    ):
        self.openapi_dict = openapi_dict
        self.dialect = dialect
        self.resolver = resolver or ReferenceResolver(openapi_dict)
        self.exclude_models = set(exclude_models)
        self.attribute_builder = AttributeBuilder(dialect, self.resolver)

    def extract(self) -> List[Model]:
        """Модели в порядке объявления схем"""
        schemas = self.openapi_dict.get("components", {}).get("schemas", {}) or {}

        models = []
        for model_name, schema in schemas.items():
            model = self.extract_model(model_name, schema)
            if model is not None:
                models.append(model)

        return models

    def extract_model(self, name: str, schema: Dict[str, Any]) -> Optional[Model]:
        schema = self.resolver.deref(schema) or {}
        schema_type, _ = get_schema_type(schema)
        properties = schema.get("properties") or {}

        if schema_type not in (None, "object"):
            logger.debug(f"Skipping {name}: type {schema_type} is not an object")
            return None
        if not properties:
            logger.debug(f"Skipping {name}: no properties")
            return None
        if name in self.exclude_models:
            logger.debug(f"Skipping {name}: excluded")
            return None

        required = set(schema.get("required") or [])
        pk_name = schema.get(X_PK) or DEFAULT_PK

        attributes: List[Attribute] = []
        relations: Dict[str, Relation] = {}

        for property_name, property_schema in properties.items():
            kind = self.classify(property_schema)

            if isinstance(kind, ToOneProperty):
                attribute = self.attribute_builder.build_reference(
                    property_name,
                    kind.target,
                    required=property_name in required,
                    description=self._description(property_schema),
                )
                attributes.append(attribute)
                relations[property_name] = Relation(
                    name=property_name,
                    class_name=kind.target,
                    cardinality=Cardinality.TO_ONE,
                    link={DEFAULT_PK: attribute.column_name},
                )

            elif isinstance(kind, ToManyProperty):
                relations[property_name] = Relation(
                    name=property_name,
                    class_name=kind.target,
                    cardinality=Cardinality.TO_MANY,
                    link={f"{snake_case(name)}_id": DEFAULT_PK},
                )

            else:
                attributes.append(
                    self.attribute_builder.build(
                        property_name,
                        kind.schema,
                        required=property_name in required,
                        primary=property_name == pk_name,
                    )
                )

        self._check_columns(name, attributes)

        logger.debug(
            f"Model {name}: {len(attributes)} attributes, {len(relations)} relations"
        )
        return Model(
            name=name,
            table_name=table_name(name),
            description=schema.get("description"),
            attributes=attributes,
            relations=relations,
        )

    def classify(self, property_schema: Any) -> PropertyKind:
        """
        Классификация свойства: обычная колонка, связь toOne или toMany.

        Связями считаются только ссылки на #/components/schemas/*, остальные
        $ref разрешаются и используются как обычные схемы.
        """
        if not isinstance(property_schema, dict):
            return ScalarProperty(schema={})

        if is_reference(property_schema):
            target = schema_name(property_schema)
            if target is not None:
                self.resolver.resolve(property_schema)
                return ToOneProperty(target=target)
            return ScalarProperty(schema=self.resolver.resolve(property_schema))

        schema_type, _ = get_schema_type(property_schema)
        if schema_type == "array":
            items = property_schema.get("items")
            target = schema_name(items)
            if target is not None:
                self.resolver.resolve(items)
                return ToManyProperty(target=target)

        return ScalarProperty(schema=property_schema)

    def _description(self, property_schema: Dict[str, Any]) -> str:
        resolved = self.resolver.deref(property_schema)
        if isinstance(resolved, dict):
            return resolved.get("description") or ""
        return ""

    @staticmethod
    def _check_columns(model_name: str, attributes: List[Attribute]):
        """
        Имена колонок в модели уникальны.

        Связь toOne добавляет колонку <property>_id, поэтому рядом с ней
        нельзя объявить одноимённое свойство.
        """
        owners: Dict[str, Attribute] = {}
        for attribute in attributes:
            previous = owners.get(attribute.column_name)
            if previous is not None:
                message = (
                    f"Колонка {attribute.column_name} объявлена дважды в {model_name}"
                )
                foreign = previous if previous.is_reference else attribute
                if foreign.is_reference:
                    message += (
                        f": внешний ключ связи {foreign.property_name} "
                        f"-> {foreign.reference} совпадает со свойством"
                    )
                raise InvalidDefinitionError(message)
            owners[attribute.column_name] = attribute
