import logging
from typing import Any, Dict, Optional, Tuple

from ..exceptions import (
    CycleDetectedError,
    InvalidDefinitionError,
    NotSupportedError,
)
from ..parser.references import ReferenceResolver, is_reference, schema_name
from ..types.dialect import Dialect
from ..types.models import ARRAY_MARKER, Attribute, Limits

logger = logging.getLogger(__name__)

X_DB_TYPE = "x-db-type"

_PHP_TYPES = {
    "integer": "int",
    "boolean": "bool",
    "number": "float",
    "string": "string",
    "object": "object",
}

_PREFIX_TYPES = (
    ("int", "integer"),
    ("string", "string"),
    ("varchar", "string"),
    ("tsvector", "string"),
    ("json", "json"),
    # TODO: в MySQL/MariaDB datetime не должен превращаться в timestamp,
    #  для PostgreSQL поведение оставить как есть
    ("datetime", "timestamp"),
)

_STRING_FORMAT_DB_TYPES = {
    "date-time": "datetime",
    "date": "date",
    "time": "time",
}


def get_schema_type(schema: Dict[str, Any]) -> Tuple[Optional[str], bool]:
    """Тип схемы и признак "null" в списке типов (OpenAPI 3.1)"""
    value = schema.get("type")
    if isinstance(value, list):
        types = [t for t in value if t != "null"]
        return (types[0] if types else None), "null" in value
    return value, False


def split_array_marker(db_type: str) -> Tuple[bool, str]:
    """'text[]' -> (True, 'text')"""
    if db_type.endswith(ARRAY_MARKER):
        return True, db_type[: -len(ARRAY_MARKER)]
    return False, db_type


class AttributeBuilder:
    """Построение Attribute из свойства OpenAPI схемы"""

    def __init__(self, dialect: Dialect, resolver: Optional[ReferenceResolver] = None):
        self.dialect = dialect
        self.resolver = resolver

    def build(
        self,
        property_name: str,
        schema: Dict[str, Any],
        required: bool = False,
        primary: bool = False,
    ) -> Attribute:
        schema = self._deref(schema)

        php_type, reference = self.php_type(schema)
        x_db_type = schema.get(X_DB_TYPE)
        db_type = self.db_type(schema, primary=primary)

        virtual = x_db_type is False
        abstract_type = self.abstract_type(
            db_type, x_db_type if isinstance(x_db_type, str) else None
        )

        nullable = schema.get("nullable")
        if not isinstance(nullable, bool):
            _, null_in_type = get_schema_type(schema)
            nullable = True if null_in_type else None

        allow_null = nullable if nullable is not None else not required
        if abstract_type == "json":
            allow_null = False

        default = schema.get("default")
        has_default = default is not None or allow_null

        size = int(schema.get("maxLength") or 0) or None
        if size is not None and size < 0:
            size = None

        enum_values = schema.get("enum")

        attribute = Attribute(
            property_name=property_name,
            column_name=property_name,
            php_type=php_type,
            db_type=db_type,
            abstract_type=abstract_type,
            x_db_type=x_db_type if isinstance(x_db_type, (str, bool)) else None,
            nullable=nullable,
            allow_null=allow_null,
            required=required,
            read_only=bool(schema.get("readOnly", False)),
            description=schema.get("description") or "",
            reference=reference,
            size=size,
            limits=Limits(
                min=schema.get("minimum"),
                max=schema.get("maximum"),
                min_length=schema.get("minLength"),
            ),
            enum_values=list(enum_values) if isinstance(enum_values, list) else None,
            default_value=default,
            has_default=has_default,
            primary=primary,
            auto_increment=primary and php_type == "int",
            virtual=virtual,
        )

        logger.debug(
            f"Attribute {property_name}: {php_type} / {db_type} -> {abstract_type}"
        )
        return attribute

    def build_reference(
        self,
        property_name: str,
        target: str,
        required: bool = False,
        description: str = "",
    ) -> Attribute:
        """Колонка внешнего ключа <property>_id для связи toOne"""
        allow_null = not required

        return Attribute(
            property_name=property_name,
            column_name=f"{property_name}_id",
            php_type="int",
            db_type="integer",
            abstract_type=self.abstract_type("integer"),
            allow_null=allow_null,
            required=required,
            description=description or "",
            reference=target,
            has_default=allow_null,
        )

    def php_type(
        self, schema: Dict[str, Any], seen: Tuple[str, ...] = ()
    ) -> Tuple[str, Optional[str]]:
        """
        Семантический тип свойства и имя связанной модели.

        Массивы разворачиваются рекурсивно: array<integer> -> int[],
        array<$ref User> -> User[] со ссылкой на User.
        seen - ссылки, уже пройденные при спуске по items.
        """
        schema_type, _ = get_schema_type(schema)

        if schema_type == "array":
            items = schema.get("items")
            if items is None:
                return "array", None

            target = schema_name(items) if is_reference(items) else None
            if target is not None:
                return target + ARRAY_MARKER, target

            item_type, reference = self.php_type(*self._items(items, seen))
            return item_type + ARRAY_MARKER, reference

        if schema_type is None:
            return "json", None

        return _PHP_TYPES.get(schema_type, schema_type), None

    def db_type(
        self,
        schema: Dict[str, Any],
        primary: bool = False,
        seen: Tuple[str, ...] = (),
    ) -> str:
        """Объявленный тип колонки до приведения к абстрактному типу"""
        if primary:
            return "pk"

        x_db_type = schema.get(X_DB_TYPE)
        if isinstance(x_db_type, str) and x_db_type:
            return x_db_type

        schema_type, _ = get_schema_type(schema)

        if schema_type == "string":
            if schema.get("maxLength") is not None:
                return f"string({int(schema['maxLength'])})"
            return _STRING_FORMAT_DB_TYPES.get(schema.get("format"), "text")

        if schema_type in ("integer", "boolean"):
            return schema_type

        if schema_type == "number":
            return schema.get("format") or "float"

        if schema_type == "array":
            items = schema.get("items")
            if items is None:
                return "json"
            if schema_name(items) is not None:
                return "json" + ARRAY_MARKER
            item_schema, seen = self._items(items, seen)
            return self.db_type(item_schema, seen=seen) + ARRAY_MARKER

        if schema_type in (None, "object"):
            return "json"

        return "text"

    def abstract_type(self, db_type: str, x_db_type: Optional[str] = None) -> str:
        """
        Физический тип колонки.

        Если задан x-db-type, он ищется в таблице типов текущего диалекта.
        Иначе тип выводится по префиксу объявленного типа, маркер массива
        сохраняется. Неизвестные типы возвращаются без изменений.

        Raises:
            InvalidDefinitionError: x-db-type отсутствует в таблице диалекта
            NotSupportedError: для диалекта нет таблицы типов
        """
        if isinstance(x_db_type, str) and x_db_type:
            is_array, token = split_array_marker(x_db_type.lower())

            type_map = self.dialect.type_map
            if type_map is None:
                raise NotSupportedError(
                    f'"x-db-type" для {self.dialect.display_name} не реализован. '
                    f"Поддерживаются только PostgreSQL, MySQL и MariaDB"
                )
            if token not in type_map:
                raise InvalidDefinitionError(
                    f"x-db-type: {token} некорректен для {self.dialect.display_name}"
                )

            return type_map[token] + (ARRAY_MARKER if is_array else "")

        is_array, _ = split_array_marker(db_type)
        lower = db_type.lower()
        for prefix, mapped in _PREFIX_TYPES:
            if lower.startswith(prefix):
                return mapped + (ARRAY_MARKER if is_array else "")

        return db_type

    def _items(
        self, items: Any, seen: Tuple[str, ...]
    ) -> Tuple[Dict[str, Any], Tuple[str, ...]]:
        """Схема элементов массива и пройденные ссылки"""
        if is_reference(items):
            pointer = items["$ref"]
            if pointer in seen:
                raise CycleDetectedError(pointer, seen)
            seen = seen + (pointer,)
        return self._deref(items), seen

    def _deref(self, schema: Any) -> Dict[str, Any]:
        if is_reference(schema):
            if self.resolver is None:
                raise InvalidDefinitionError(
                    f"Ссылка {schema['$ref']} без резолвера ссылок"
                )
            schema = self.resolver.resolve(schema)
        return schema if isinstance(schema, dict) else {}
