import argparse
import json
import logging
import os
import sys
from typing import Any, Dict

from openapi_model.internal.exceptions import OpenApiModelError
from openapi_model.internal.types.dialect import Dialect
from openapi_model.internal.types.models import Project
from openapi_model.generator import ApiModelGenerator
from openapi_model.config import OpenApiConfig, CONFIG_FILE_NAME

import httpx

logger = logging.getLogger(__name__)


def load_spec(url: str) -> Dict[str, Any]:
    """Загрузка OpenAPI спецификации по URL или из локального JSON файла"""
    # Проверяем - это локальный файл или URL
    if url.startswith(("http://", "https://")):
        response = httpx.get(url)
        response.raise_for_status()
        return response.json()

    if os.path.exists(url):
        with open(url, "r", encoding="utf-8") as f:
            return json.load(f)

    raise ValueError(
        f"Не удалось загрузить спецификацию из {url}. Проверьте URL или путь к файлу."
    )


def build_project(config: OpenApiConfig) -> Project:
    """Ядро: загрузка спецификации и построение моделей/маршрутов"""
    if not config.url:
        raise ValueError("URL не указан в конфигурации")

    print(f"🚀 Построение моделей из {config.url}")

    print("📥 Загрузка OpenAPI спецификации...")
    openapi_spec = load_spec(config.url)

    dialect = Dialect.detect(config.dialect or "mysql", config.server_version or "")
    print(f"🗄️ Диалект БД: {dialect.display_name}")

    print("⚙️ Построение моделей и маршрутов...")
    generator = ApiModelGenerator(
        openapi_spec, dialect=dialect, exclude_models=config.exclude_models
    )
    return generator.generate()


def save_project(project: Project, output_path: str):
    """Сохранение результата для слоя генерации кода"""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(project.model_dump_json(indent=2))

    print(
        f"✅ Моделей: {len(project.models)}, маршрутов: {len(project.routes)}"
    )
    print(f"📦 Результат сохранен в: {os.path.abspath(output_path)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Построение моделей и маршрутов из OpenAPI"
    )
    parser.add_argument("--url", type=str, help="URL или путь к OpenAPI спецификации")
    parser.add_argument("--output", type=str, help="Файл для результата (JSON)")
    parser.add_argument(
        "--dialect", type=str, help="Драйвер БД: mysql, pgsql, sqlite, ..."
    )
    parser.add_argument(
        "--server-version",
        type=str,
        help="Версия сервера БД (для различения MySQL и MariaDB)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        help="Имя схемы, для которой модель не строится (можно повторять)",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help=f"Создать конфиг файл {CONFIG_FILE_NAME}",
    )
    parser.add_argument("--verbose", action="store_true", help="Подробный лог")
    return parser


def generate(argv=None):
    """Команда построения моделей из OpenAPI"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Инициализация конфига
    if args.init_config:
        config = OpenApiConfig(
            url=args.url,
            output=args.output or "models.json",
            dialect=args.dialect or "mysql",
            server_version=args.server_version,
            exclude_models=list(args.exclude or []),
        )
        config.save_to_file()
        print(f"✅ Создан конфиг файл {CONFIG_FILE_NAME}")
        return

    file_config = OpenApiConfig.from_file()

    if file_config:
        print(f"📋 Используется конфиг из {CONFIG_FILE_NAME}")
        final_config = file_config.merge_with_args(args)
    elif args.url:
        final_config = OpenApiConfig(
            url=args.url,
            output=args.output or "models.json",
            dialect=args.dialect or "mysql",
            server_version=args.server_version,
            exclude_models=list(args.exclude or []),
        )
    else:
        print("❌ Ошибка: Укажите --url или создайте конфиг с --init-config")
        sys.exit(1)

    try:
        project = build_project(final_config)
        save_project(project, final_config.output or "models.json")

    except (OpenApiModelError, ValueError, httpx.HTTPError) as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)


if __name__ == "__main__":
    generate()
