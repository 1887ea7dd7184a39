"""
Тесты для системы конфигурации
"""

import os
import tempfile
import pytest
from openapi_model.config import OpenApiConfig, CONFIG_FILE_NAME


class TestOpenApiConfig:
    """Тесты конфигурации"""

    def test_config_creation(self):
        """Тест создания конфигурации"""
        config = OpenApiConfig(url="http://localhost:8000/openapi.json", dialect="pgsql")

        assert config.url == "http://localhost:8000/openapi.json"
        assert config.dialect == "pgsql"
        assert config.exclude_models == []

    def test_config_save_and_load(self):
        """Тест сохранения и загрузки конфигурации"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, "test_openapi_model.toml")

            original_config = OpenApiConfig(
                url="spec/openapi.json",
                output="build/models.json",
                dialect="mysql",
                server_version="10.6.12-MariaDB",
                exclude_models=["Error", "Pagination"],
            )
            original_config.save_to_file(config_path)

            loaded_config = OpenApiConfig.from_file(config_path)

            assert loaded_config is not None
            assert loaded_config.url == "spec/openapi.json"
            assert loaded_config.output == "build/models.json"
            assert loaded_config.dialect == "mysql"
            assert loaded_config.server_version == "10.6.12-MariaDB"
            assert loaded_config.exclude_models == ["Error", "Pagination"]

    def test_config_found_in_search_dir(self):
        """Тест поиска конфига в директории"""
        with tempfile.TemporaryDirectory() as temp_dir:
            OpenApiConfig(url="a.json").save_to_file(
                os.path.join(temp_dir, CONFIG_FILE_NAME)
            )

            loaded_config = OpenApiConfig.from_file(search_dir=temp_dir)

            assert loaded_config.url == "a.json"
            assert loaded_config.output == "models.json"
            assert loaded_config.dialect == "mysql"

    def test_config_file_not_exists(self):
        """Тест загрузки несуществующего конфига"""
        config = OpenApiConfig.from_file("nonexistent.toml")
        assert config is None

    def test_broken_config_file(self, tmp_path):
        """Тест загрузки некорректного TOML"""
        config_path = tmp_path / "broken.toml"
        config_path.write_text("url = [unclosed")

        assert OpenApiConfig.from_file(str(config_path)) is None

    def test_config_merge_with_args(self):
        """Тест объединения конфига с аргументами"""
        config = OpenApiConfig(
            url="http://localhost:8000", dialect="mysql", exclude_models=["Error"]
        )

        # Мокаем args
        class MockArgs:
            def __init__(self):
                self.url = None
                self.output = "out.json"
                self.dialect = "pgsql"
                self.server_version = None
                self.exclude = None

        merged = config.merge_with_args(MockArgs())

        assert merged.url == "http://localhost:8000"  # Остался из config
        assert merged.output == "out.json"  # Переписан из args
        assert merged.dialect == "pgsql"
        assert merged.exclude_models == ["Error"]

    def test_default_values(self):
        """Тест значений по умолчанию"""
        config = OpenApiConfig()

        assert config.url is None
        assert config.output is None
        assert config.dialect is None
        assert config.server_version is None
