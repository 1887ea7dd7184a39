"""
Интеграционные тесты для генератора
"""

import json

import pytest
from openapi_model import ApiModelGenerator, Cardinality, ResponseWrapper
from openapi_model.cli import generate


def json_body(schema):
    return {"content": {"application/json": {"schema": schema}}}


COMPLEX_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Complex API", "version": "2.0.0"},
    "components": {
        "schemas": {
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "username": {"type": "string", "maxLength": 32},
                    "email": {"type": "string", "format": "email"},
                    "settings": {"type": "object"},
                    "role": {"$ref": "#/components/schemas/UserRole"},
                    "articles": {
                        "type": "array",
                        "items": {"$ref": "#/components/schemas/Article"},
                    },
                },
                "required": ["id", "username", "email"],
            },
            "Article": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "title": {"type": "string"},
                    "body": {"type": "string", "x-db-type": "TEXT"},
                    "author": {"$ref": "#/components/schemas/User"},
                },
                "required": ["title", "author"],
            },
            "UserRole": {
                "type": "string",
                "enum": ["admin", "user", "moderator"],
            },
            "ArticlePage": {
                "type": "object",
                "properties": {
                    "total": {"type": "integer"},
                    "items": {
                        "type": "array",
                        "items": {"$ref": "#/components/schemas/Article"},
                    },
                },
            },
        }
    },
    "paths": {
        "/users/{id}": {
            "parameters": [
                {
                    "name": "id",
                    "in": "path",
                    "required": True,
                    "schema": {"type": "integer"},
                }
            ],
            "get": {
                "responses": {
                    "200": json_body(
                        {
                            "type": "object",
                            "properties": {
                                "user": {"$ref": "#/components/schemas/User"}
                            },
                        }
                    )
                }
            },
            "delete": {"responses": {"204": {"description": "Deleted"}}},
        },
        "/users/{id}/articles": {
            "parameters": [{"name": "id", "in": "path", "required": True}],
            "get": {
                "responses": {
                    "200": json_body(
                        {
                            "type": "object",
                            "properties": {
                                "list": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Article"},
                                }
                            },
                        }
                    )
                }
            },
        },
        "/articles": {
            "post": {
                "requestBody": json_body({"$ref": "#/components/schemas/Article"}),
                "responses": {"201": {"description": "Created"}},
            },
        },
    },
}


class TestIntegration:
    """Интеграционные тесты"""

    def test_complete_generation_workflow(self):
        """Тест полного процесса построения моделей и маршрутов"""
        project = ApiModelGenerator(COMPLEX_SPEC).generate()

        assert [model.name for model in project.models] == [
            "User",
            "Article",
            "ArticlePage",
        ]

        user = project.get_model("User")
        assert user.column_names() == [
            "id",
            "username",
            "email",
            "settings",
            "role_id",
        ]
        assert user.get_attribute("settings").abstract_type == "json"
        assert user.get_attribute("settings").allow_null is False
        assert user.relations["articles"].cardinality is Cardinality.TO_MANY
        assert user.relations["articles"].link == {"user_id": "id"}
        assert user.relations["role"].class_name == "UserRole"

        article = project.get_model("Article")
        assert article.get_attribute("body").abstract_type == "text"
        assert article.get_attribute("author").column_name == "author_id"
        assert article.relations["author"].link == {"id": "author_id"}

        assert [(route.method, route.route) for route in project.routes] == [
            ("GET", "user/view"),
            ("DELETE", "user/delete"),
            ("GET", "user/view-articles"),
            ("POST", "article/create"),
        ]

        view, delete, articles, create = project.routes
        assert view.model_class == "User"
        assert view.response_wrapper == ResponseWrapper(item_key="user")
        assert delete.model_class == "User"
        assert articles.model_class == "Article"
        assert articles.response_wrapper == ResponseWrapper(items_key="list")
        assert create.model_class == "Article"
        assert create.response_wrapper is None

    def test_project_serialization(self):
        """Тест сериализации результата в JSON"""
        project = ApiModelGenerator(COMPLEX_SPEC, dialect="pgsql").generate()

        data = json.loads(project.model_dump_json())

        assert data["name"] == "Complex API"
        assert data["dialect"] == "pgsql"
        assert data["routes"][0]["pattern"] == "users/<id>"
        assert data["models"][0]["relations"]["articles"]["cardinality"] == "toMany"


class TestCli:
    """Тесты командной строки"""

    def test_generate_from_local_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        spec_path = tmp_path / "openapi.json"
        spec_path.write_text(json.dumps(COMPLEX_SPEC), encoding="utf-8")

        generate(
            [
                "--url",
                str(spec_path),
                "--output",
                "out/models.json",
                "--dialect",
                "mysql",
                "--server-version",
                "10.6.12-MariaDB",
                "--exclude",
                "ArticlePage",
            ]
        )

        result = json.loads((tmp_path / "out" / "models.json").read_text("utf-8"))
        assert result["dialect"] == "mariadb"
        assert [model["name"] for model in result["models"]] == ["User", "Article"]
        assert len(result["routes"]) == 4
        assert "MariaDB" in capsys.readouterr().out

    def test_init_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        generate(["--init-config", "--url", "openapi.json", "--dialect", "pgsql"])

        content = (tmp_path / "openapi_model.toml").read_text()
        assert 'url = "openapi.json"' in content
        assert 'dialect = "pgsql"' in content

    def test_missing_url(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            generate([])

        assert exc_info.value.code == 1

    def test_invalid_spec_exits_with_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        spec_path = tmp_path / "broken.json"
        spec_path.write_text(
            json.dumps({"paths": {"users": {"get": {}}}}), encoding="utf-8"
        )

        with pytest.raises(SystemExit) as exc_info:
            generate(["--url", str(spec_path)])

        assert exc_info.value.code == 1
        assert "Ошибка генерации" in capsys.readouterr().out
