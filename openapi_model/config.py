"""
Конфигурация построения моделей
"""

import os
import logging
from typing import List, Optional
import toml
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "openapi_model.toml"


@dataclass
class OpenApiConfig:
    """Конфигурация генератора моделей"""

    url: Optional[str] = None
    output: Optional[str] = None
    dialect: Optional[str] = None
    server_version: Optional[str] = None
    exclude_models: List[str] = field(default_factory=list)

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["OpenApiConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as exc:
            logger.warning(f"Не удалось прочитать {config_path}: {exc}")
            return None

        return cls(
            url=config_data.get("url"),
            output=config_data.get("output", "models.json"),
            dialect=config_data.get("dialect", "mysql"),
            server_version=config_data.get("server_version"),
            exclude_models=list(config_data.get("exclude_models", [])),
        )

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {
            key: value
            for key, value in {
                "url": self.url,
                "output": self.output,
                "dialect": self.dialect,
                "server_version": self.server_version,
                "exclude_models": self.exclude_models,
            }.items()
            if value is not None
        }

        with open(config_path, "w") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "OpenApiConfig":
        """Объединение с аргументами командной строки"""
        return OpenApiConfig(
            url=args.url or self.url,
            output=args.output or self.output,
            dialect=args.dialect or self.dialect,
            server_version=args.server_version or self.server_version,
            exclude_models=list(args.exclude or self.exclude_models),
        )
