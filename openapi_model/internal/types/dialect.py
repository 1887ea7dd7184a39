"""
Диалекты БД и их таблицы физических типов.

Каждая таблица отображает имя типа колонки (в нижнем регистре) на
абстрактный тип, с которым работает слой миграций.
"""

from enum import Enum
from typing import Dict, Optional

from ..exceptions import NotSupportedError


MYSQL_TYPE_MAP: Dict[str, str] = {
    "tinyint": "tinyint",
    "bit": "integer",
    "smallint": "smallint",
    "mediumint": "integer",
    "int": "integer",
    "integer": "integer",
    "bigint": "bigint",
    "float": "float",
    "double": "double",
    "real": "float",
    "decimal": "decimal",
    "numeric": "decimal",
    "tinytext": "text",
    "mediumtext": "text",
    "longtext": "text",
    "longblob": "binary",
    "blob": "binary",
    "text": "text",
    "varchar": "string",
    "string": "string",
    "char": "char",
    "datetime": "datetime",
    "year": "date",
    "date": "date",
    "time": "time",
    "timestamp": "timestamp",
    "enum": "string",
    "varbinary": "binary",
    "json": "json",
}

# MariaDB наследует словарь MySQL, JSON хранится как longtext с проверкой
MARIADB_TYPE_MAP: Dict[str, str] = {
    **MYSQL_TYPE_MAP,
    "mediumblob": "binary",
    "tinyblob": "binary",
}

POSTGRESQL_TYPE_MAP: Dict[str, str] = {
    "bit": "integer",
    "bit varying": "integer",
    "varbit": "integer",
    "bool": "boolean",
    "boolean": "boolean",
    "box": "string",
    "circle": "string",
    "point": "string",
    "line": "string",
    "lseg": "string",
    "polygon": "string",
    "path": "string",
    "character": "char",
    "char": "char",
    "bpchar": "char",
    "character varying": "string",
    "varchar": "string",
    "text": "text",
    "bytea": "binary",
    "cidr": "string",
    "inet": "string",
    "macaddr": "string",
    "real": "float",
    "float4": "float",
    "double precision": "double",
    "float8": "double",
    "decimal": "decimal",
    "numeric": "decimal",
    "money": "money",
    "smallint": "smallint",
    "int2": "smallint",
    "int4": "integer",
    "int": "integer",
    "integer": "integer",
    "bigint": "bigint",
    "int8": "bigint",
    "oid": "bigint",
    "smallserial": "smallint",
    "serial2": "smallint",
    "serial4": "integer",
    "serial": "integer",
    "bigserial": "bigint",
    "serial8": "bigint",
    "pg_lsn": "bigint",
    "date": "date",
    "interval": "string",
    "time without time zone": "time",
    "time": "time",
    "time with time zone": "time",
    "timetz": "time",
    "timestamp without time zone": "timestamp",
    "timestamp": "timestamp",
    "timestamp with time zone": "timestamp",
    "timestamptz": "timestamp",
    "abstime": "timestamp",
    "tsquery": "string",
    "tsvector": "string",
    "txid_snapshot": "string",
    "unknown": "string",
    "uuid": "string",
    "json": "json",
    "jsonb": "json",
    "xml": "string",
}


class Dialect(str, Enum):
    MYSQL = "mysql"
    MARIADB = "mariadb"
    POSTGRESQL = "pgsql"
    SQLITE = "sqlite"
    SQLSRV = "sqlsrv"
    OCI = "oci"
    CUBRID = "cubrid"

    @property
    def display_name(self) -> str:
        return _TITLES[self]

    @property
    def type_map(self) -> Optional[Dict[str, str]]:
        """Таблица физических типов или None, если диалект её не имеет"""
        return _TYPE_MAPS.get(self)

    @classmethod
    def detect(cls, driver_name: str, server_version: str = "") -> "Dialect":
        """
        Определение диалекта по имени драйвера соединения.

        MySQL и MariaDB используют один драйвер, поэтому различаются
        по строке версии сервера.
        """
        name = (driver_name or "").strip().lower()
        name = _DRIVER_ALIASES.get(name, name)

        try:
            dialect = cls(name)
        except ValueError:
            raise NotSupportedError(
                f"Драйвер БД {driver_name!r} не поддерживается"
            ) from None

        if dialect is cls.MYSQL and "MariaDB" in (server_version or ""):
            return cls.MARIADB

        return dialect


_TITLES = {
    Dialect.MYSQL: "MySQL",
    Dialect.MARIADB: "MariaDB",
    Dialect.POSTGRESQL: "PostgreSQL",
    Dialect.SQLITE: "SQLite",
    Dialect.SQLSRV: "MSSQL",
    Dialect.OCI: "Oracle",
    Dialect.CUBRID: "CUBRID",
}

_TYPE_MAPS = {
    Dialect.MYSQL: MYSQL_TYPE_MAP,
    Dialect.MARIADB: MARIADB_TYPE_MAP,
    Dialect.POSTGRESQL: POSTGRESQL_TYPE_MAP,
}

_DRIVER_ALIASES = {
    "postgres": "pgsql",
    "postgresql": "pgsql",
    "mysqli": "mysql",
    "mssql": "sqlsrv",
    "dblib": "sqlsrv",
    "oracle": "oci",
}
