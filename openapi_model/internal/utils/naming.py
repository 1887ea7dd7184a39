"""Утилиты для работы с именами моделей, таблиц и контроллеров"""

import re
from typing import List, Tuple


_UNCOUNTABLE = {
    "equipment",
    "information",
    "metadata",
    "money",
    "news",
    "rice",
    "series",
    "sheep",
    "species",
    "fish",
}

_IRREGULAR = {
    "person": "people",
    "man": "men",
    "child": "children",
    "foot": "feet",
    "tooth": "teeth",
    "goose": "geese",
    "criterion": "criteria",
    "move": "moves",
    "cookie": "cookies",
}

_PLURAL_RULES: List[Tuple[str, str]] = [
    (r"(quiz)$", r"\1zes"),
    (r"^(ox)$", r"\1en"),
    (r"([ml])ouse$", r"\1ice"),
    (r"(matr|vert|ind)(ix|ex)$", r"\1ices"),
    (r"(x|ch|ss|sh|z)$", r"\1es"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(hive)$", r"\1s"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"sis$", "ses"),
    (r"([ti])um$", r"\1a"),
    (r"(buffal|tomat|potat)o$", r"\1oes"),
    (r"(bu)s$", r"\1ses"),
    (r"(alias|status)$", r"\1es"),
    (r"(octop|vir)us$", r"\1i"),
    (r"(ax|test)is$", r"\1es"),
    (r"s$", "s"),
    (r"$", "s"),
]

_SINGULAR_RULES: List[Tuple[str, str]] = [
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"^(ox)en$", r"\1"),
    (r"(alias|status)(es)?$", r"\1"),
    (r"(octop|vir)i$", r"\1us"),
    (r"(cris|ax|test)es$", r"\1is"),
    (r"(shoe|slave)s$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(bus)(es)?$", r"\1"),
    (r"([ml])ice$", r"\1ouse"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(m)ovies$", r"\1ovie"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"(tive|hive)s$", r"\1"),
    (r"([^f])ves$", r"\1fe"),
    (r"(analy|diagno|parenthe|progno|synop|the)ses$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"(ss)$", r"\1"),
    (r"s$", ""),
]


def _match_case(source: str, replacement: str) -> str:
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _apply_rules(word: str, rules: List[Tuple[str, str]]) -> str:
    for pattern, replacement in rules:
        if re.search(pattern, word, flags=re.IGNORECASE):
            return re.sub(pattern, replacement, word, count=1, flags=re.IGNORECASE)
    return word


def _last_word(name: str) -> Tuple[str, str]:
    """Делит имя на префикс и последнее слово: UserProfile -> (User, Profile)"""
    match = re.search(r"([A-Z]?[a-z0-9]*|[A-Z]+)$", name)
    if not match or not match.group(1):
        return "", name
    return name[: match.start(1)], match.group(1)


def pluralize(name: str) -> str:
    """
    Множественное число для последнего слова имени.

    Examples:
        >>> pluralize("User")
        'Users'
        >>> pluralize("BlogCategory")
        'BlogCategories'
        >>> pluralize("Person")
        'People'
    """
    if not name:
        return name

    prefix, word = _last_word(name)
    lower = word.lower()

    if lower in _UNCOUNTABLE:
        return name
    if lower in _IRREGULAR:
        return prefix + _match_case(word, _IRREGULAR[lower])

    return prefix + _apply_rules(word, _PLURAL_RULES)


def singularize(name: str) -> str:
    """
    Единственное число для последнего слова имени.

    Examples:
        >>> singularize("users")
        'user'
        >>> singularize("categories")
        'category'
        >>> singularize("user-profiles")
        'user-profile'
    """
    if not name:
        return name

    prefix, word = _last_word(name)
    lower = word.lower()

    if lower in _UNCOUNTABLE:
        return name
    for singular, plural in _IRREGULAR.items():
        if lower == plural:
            return prefix + _match_case(word, singular)

    return prefix + _apply_rules(word, _SINGULAR_RULES)


def snake_case(name: str) -> str:
    # Сначала заменяем дефисы на подчеркивания
    name = name.replace("-", "_")

    # HTTPValidationError -> http_validation_error
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1)
    s3 = re.sub("([A-Z]+)([A-Z][a-z])", r"\1_\2", s2)
    s4 = re.sub("_+", "_", s3)
    return s4.lower()


def table_name(model_name: str) -> str:
    """Имя таблицы в формате, который ожидает генератор миграций: {{%users}}"""
    return "{{%" + snake_case(pluralize(model_name)) + "}}"
