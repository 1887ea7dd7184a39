import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import MalformedPathError
from ..parser.references import ReferenceResolver, is_reference, schema_name
from ..types.models import ResponseWrapper, Route
from ..utils.naming import singularize
from .attribute_builder import get_schema_type

logger = logging.getLogger(__name__)

# Порядок важен: от него зависит подстановка модели с соседних методов
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

WRITE_ACTIONS = ("create", "update", "delete")
READ_ACTIONS = ("view", "index")

_PARAM_SEGMENT = re.compile(r"\{(.*)\}")

# (имя модели, ключ одиночного объекта, ключ списка)
ContentMatch = Tuple[Optional[str], Optional[str], Optional[str]]
_NO_MATCH: ContentMatch = (None, None, None)


def base_action(method: str, has_params: bool) -> str:
    """Базовое имя действия по HTTP методу"""
    method = method.lower()
    if method == "get":
        return "view" if has_params else "index"
    if method == "post":
        return "create"
    if method in ("put", "patch"):
        return "update"
    if method == "delete":
        return "delete"
    return f"http-{method}"


class RouteInference:
    """Построение маршрутов controller/action из paths"""

    def __init__(
        self, openapi_dict: Dict[str, Any], resolver: ReferenceResolver = None
    ):
        self.openapi_dict = openapi_dict
        self.resolver = resolver or ReferenceResolver(openapi_dict)

    def infer(
        self, known_model_classes: Optional[Dict[str, str]] = None
    ) -> Tuple[List[Route], Dict[str, str]]:
        """
        Маршруты для всех пар (path, method).

        known_model_classes - последняя найденная модель для каждого пути.
        Используется, когда для метода модель определить не удалось.
        Возвращается вместе с маршрутами, чтобы её можно было передать
        в следующий вызов.
        """
        known = dict(known_model_classes or {})
        routes: List[Route] = []

        for path, path_item in (self.openapi_dict.get("paths") or {}).items():
            if not path.startswith("/"):
                raise MalformedPathError(path)
            if path_item is None:
                continue

            path_routes, known = self.infer_path(path, path_item, known)
            routes.extend(path_routes)

        return routes, known

    def infer_path(
        self, path: str, path_item: Dict[str, Any], known: Dict[str, str]
    ) -> Tuple[List[Route], Dict[str, str]]:
        if not path.startswith("/"):
            raise MalformedPathError(path)

        path_item = self.resolver.deref(path_item)
        known = dict(known)

        pattern, controller, sub_action, path_params = self.parse_path(path)

        routes = []
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if operation is None:
                continue

            action = base_action(method, bool(path_params))
            model_class, _, _ = self.guess_model_class(operation, action)
            # Обёртка ищется только для модели, найденной у самой операции
            response_wrapper = self.find_response_wrapper(operation, model_class)

            if model_class is None and known.get(path):
                model_class = known[path]
                logger.debug(
                    f"{method.upper()} {path}: reusing model {model_class} from another method"
                )
            else:
                known[path] = model_class

            routes.append(
                Route(
                    path=path,
                    method=method.upper(),
                    pattern=pattern,
                    route=f"{controller}/{action}{sub_action}",
                    path_params=path_params,
                    action_params=self._action_params(
                        path_params, path_item, operation
                    ),
                    model_class=model_class,
                    response_wrapper=response_wrapper,
                )
            )

        return routes, known

    @staticmethod
    def parse_path(path: str) -> Tuple[str, str, str, List[str]]:
        """
        Разбор шаблона пути.

        Returns:
            (pattern, controller, sub_action, path_params)

        Examples:
            /users/{id}/posts -> ("users/<id>/posts", "user", "-posts", ["id"])
        """
        if not path.startswith("/"):
            raise MalformedPathError(path)

        stripped = path.strip("/")
        parts = stripped.split("/") if stripped else []

        controller = []
        action = []
        params = []

        for index, part in enumerate(parts):
            match = _PARAM_SEGMENT.search(part)
            if match:
                params.append(match.group(1))
                parts[index] = f"<{match.group(1)}>"
            elif params:
                action.append(part)
            else:
                controller.append(singularize(part))

        sub_action = "-" + "-".join(action) if action else ""
        return "/".join(parts), "-".join(controller) or "default", sub_action, params

    def guess_model_class(self, operation: Dict[str, Any], action: str) -> ContentMatch:
        """
        Поиск модели для операции.

        create/update/delete: сначала тело запроса, затем успешные ответы.
        view/index: только успешные ответы.
        """
        if action in WRITE_ACTIONS:
            request_body = self.resolver.deref(operation.get("requestBody"))
            if request_body:
                for content in (request_body.get("content") or {}).values():
                    match = self.guess_model_class_from_content(content)
                    if match[0] is not None:
                        return match

        if action in WRITE_ACTIONS or action in READ_ACTIONS:
            for content in self._success_contents(operation):
                match = self.guess_model_class_from_content(content)
                if match[0] is not None:
                    return match

        return _NO_MATCH

    def guess_model_class_from_content(self, content: Dict[str, Any]) -> ContentMatch:
        """Модель из media type: прямая, массивом или обёрнутая в свойство"""
        if not content:
            return _NO_MATCH

        schema = content.get("schema")
        if schema is None:
            return _NO_MATCH

        if is_reference(schema):
            referenced = self.resolver.resolve(schema)
            referenced_type, _ = get_schema_type(referenced)

            # Модель отдается напрямую
            if referenced_type in (None, "object"):
                name = schema_name(schema)
                if name is not None:
                    return name, None, None

            # Массив моделей отдается напрямую
            if referenced_type == "array":
                name = schema_name(referenced.get("items"))
                if name is not None:
                    return name, None, None
            schema = referenced

        schema_type, _ = get_schema_type(schema)

        if schema_type == "array":
            name = schema_name(schema.get("items"))
            if name is not None:
                return name, None, None

        if schema_type not in (None, "object"):
            return _NO_MATCH

        for property_name, property_schema in (schema.get("properties") or {}).items():
            match = self._wrapped_model(property_name, property_schema)
            if match[0] is not None:
                return match

        return _NO_MATCH

    def find_response_wrapper(
        self, operation: Dict[str, Any], model_class: Optional[str]
    ) -> Optional[ResponseWrapper]:
        """Ключ, под которым модель лежит в успешном ответе, если она обёрнута"""
        if model_class is None:
            return None

        for content in self._success_contents(operation):
            name, item_key, items_key = self.guess_model_class_from_content(content)
            if (item_key is not None or items_key is not None) and name == model_class:
                return ResponseWrapper(item_key=item_key, items_key=items_key)

        return None

    def _wrapped_model(self, property_name: str, property_schema: Any) -> ContentMatch:
        if not isinstance(property_schema, dict):
            return _NO_MATCH

        if is_reference(property_schema):
            name = schema_name(property_schema)
            referenced = self.resolver.resolve(property_schema)
            referenced_type, _ = get_schema_type(referenced)

            # Модель обёрнута
            if referenced_type in (None, "object") and name is not None:
                return name, property_name, None

            # Массив моделей обёрнут
            if referenced_type == "array":
                items_name = schema_name(referenced.get("items"))
                if items_name is not None:
                    return items_name, None, property_name

            return _NO_MATCH

        property_type, _ = get_schema_type(property_schema)
        if property_type == "array":
            items_name = schema_name(property_schema.get("items"))
            if items_name is not None:
                return items_name, None, property_name

        return _NO_MATCH

    def _success_contents(self, operation: Dict[str, Any]):
        for code, response in (operation.get("responses") or {}).items():
            if not str(code).startswith("2"):
                continue

            response = self.resolver.deref(response)
            for content in ((response or {}).get("content") or {}).values():
                yield content

    def _action_params(
        self,
        path_params: List[str],
        path_item: Dict[str, Any],
        operation: Dict[str, Any],
    ) -> Dict[str, Optional[Dict[str, Any]]]:
        """Имя параметра пути -> его описание (операция важнее path item)"""
        declared = {}
        for parameter in list(path_item.get("parameters") or []) + list(
            operation.get("parameters") or []
        ):
            parameter = self.resolver.deref(parameter)
            if parameter.get("in") == "path":
                declared[parameter.get("name")] = parameter

        return {name: declared.get(name) for name in path_params}
