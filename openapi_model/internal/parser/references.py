import logging
from typing import Any, Dict, Optional, Union

import jsonref

from ..exceptions import CycleDetectedError, DanglingReferenceError

logger = logging.getLogger(__name__)

SCHEMAS_PREFIX = "#/components/schemas/"


def is_reference(node: Any) -> bool:
    return isinstance(node, dict) and isinstance(node.get("$ref"), str)


def schema_name(ref: Union[str, Dict[str, Any], None]) -> Optional[str]:
    """
    Имя схемы из components/schemas для ссылки вида #/components/schemas/NAME.

    Для любых других указателей возвращает None - такие ссылки в поиске
    связей не участвуют.
    """
    if isinstance(ref, dict):
        ref = ref.get("$ref")
    if not isinstance(ref, str) or not ref.startswith(SCHEMAS_PREFIX):
        return None

    name = ref[len(SCHEMAS_PREFIX) :]
    if not name or "/" in name:
        return None
    return name.replace("~1", "/").replace("~0", "~")


class ReferenceResolver:
    """
    Резолвер $ref внутри одного документа.

    Результаты кешируются на время прогона. Если цель ссылки сама является
    ссылкой, цепочка разворачивается до конкретного узла.
    """

    def __init__(self, document: Dict[str, Any]):
        self.document = document
        self._cache: Dict[str, Any] = {}
        self._in_progress: Dict[str, None] = {}

    def resolve(self, ref: Union[str, Dict[str, Any]]) -> Any:
        pointer = ref.get("$ref") if isinstance(ref, dict) else ref

        if not isinstance(pointer, str):
            raise DanglingReferenceError(repr(ref), "ожидалась строка $ref")

        if pointer in self._cache:
            return self._cache[pointer]

        if pointer in self._in_progress:
            raise CycleDetectedError(pointer, tuple(self._in_progress))

        self._in_progress[pointer] = None
        try:
            target = self._lookup(pointer)
            if is_reference(target):
                target = self.resolve(target)
        finally:
            del self._in_progress[pointer]

        logger.debug(f"Resolved {pointer}")
        self._cache[pointer] = target
        return target

    def deref(self, node: Any) -> Any:
        """Узел как есть, либо цель ссылки, если это $ref"""
        if is_reference(node):
            return self.resolve(node)
        return node

    def _lookup(self, pointer: str) -> Any:
        if not pointer.startswith("#"):
            raise DanglingReferenceError(
                pointer, "внешние документы не поддерживаются"
            )

        # Атрибуты экземпляра JsonRef проксируются на ленивую цель,
        # поэтому метод вызывается через класс
        ref = jsonref.JsonRef({"$ref": pointer})
        try:
            return jsonref.JsonRef.resolve_pointer(ref, self.document, pointer[1:])
        except jsonref.JsonRefError as exc:
            raise DanglingReferenceError(pointer, exc.message) from exc
