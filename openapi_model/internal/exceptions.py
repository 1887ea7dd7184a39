"""
Исключения генератора моделей.

Любое из них прерывает текущий прогон целиком: частично собранные
модели и маршруты для слоя генерации кода смысла не имеют.
"""

from typing import Optional


class OpenApiModelError(Exception):
    """Базовая ошибка построения моделей/маршрутов из OpenAPI"""


class DanglingReferenceError(OpenApiModelError):
    """$ref не разрешается внутри документа"""

    def __init__(self, ref: str, reason: Optional[str] = None):
        self.ref = ref
        self.reason = reason
        message = f"Не удалось разрешить ссылку {ref!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CycleDetectedError(OpenApiModelError):
    """Цепочка $ref замкнулась сама на себя"""

    def __init__(self, ref: str, chain: tuple = ()):
        self.ref = ref
        self.chain = tuple(chain)
        path = " -> ".join(self.chain + (ref,))
        super().__init__(f"Циклическая ссылка: {path}")


class InvalidDefinitionError(OpenApiModelError):
    """Некорректное определение свойства или модели"""


class NotSupportedError(OpenApiModelError):
    """Возможность не реализована для текущего диалекта БД"""


class MalformedPathError(OpenApiModelError):
    """Шаблон пути не начинается с '/'"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Путь должен начинаться с '/': {path!r}")
