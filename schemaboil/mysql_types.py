"""Type mapping, connection strings and imports for MySQL databases."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from urllib.parse import quote_plus

from schemaboil.importers import Collection, ImportSet
from schemaboil.schema import Column

DEFAULT_PORT = 3306

_NULL_PKG = '"github.com/volatiletech/null/v8"'
_TYPES_PKG = '"github.com/volatiletech/sqlboiler/v4/types"'

_ENUM_RE = re.compile(r"^enum(\.\w+)?\([^)]+\)$")

_UPPERCASE_WORDS = frozenset(
    {
        "acl", "api", "ascii", "cpu", "eof", "guid", "id", "ip", "json",
        "ram", "sla", "udp", "ui", "uid", "uuid", "uri", "url", "utf8",
    }
)


def _parse_enum_vals(db_type: str) -> list[str]:
    """Values of an enum type such as ``enum('a','b')``; empty if not an enum."""
    if not _ENUM_RE.match(db_type):
        return []
    start = db_type.index("(")
    return db_type[start + 2 : -2].split("','")


def _title_case(name: str) -> str:
    """Convert snake_case to TitleCase, upper-casing common initialisms."""
    words = []
    for word in name.split("_"):
        if not word:
            continue
        if word.lower() in _UPPERCASE_WORDS:
            words.append(word.upper())
        else:
            words.append(word[0].upper() + word[1:])
    return "".join(words)


def build_query_string(
    user: str, password: str, dbname: str, host: str, port: int, sslmode: str
) -> str:
    """Build a MySQL DSN of the form user:password@tcp(host:port)/dbname?..."""
    parts = []
    if user:
        parts.append(user)
        if password:
            parts.append(":" + password)
        parts.append("@")
    parts.append(f"tcp({host}:{port or DEFAULT_PORT})")
    parts.append("/" + dbname)

    # Dates are read as time values rather than raw bytes.
    params = ["parseTime=true"]
    if sslmode:
        params.append("tls=" + quote_plus(sslmode))
    return "".join(parts) + "?" + "&".join(params)


_NULLABLE_FIXED = {
    "float": "null.Float32",
    **dict.fromkeys(("double", "double precision", "real"), "null.Float64"),
    **dict.fromkeys(("boolean", "bool"), "null.Bool"),
    **dict.fromkeys(("date", "datetime", "timestamp"), "null.Time"),
    **dict.fromkeys(
        ("binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"),
        "null.Bytes",
    ),
    **dict.fromkeys(("numeric", "decimal", "dec", "fixed"), "types.NullDecimal"),
    "json": "null.JSON",
}

_NOT_NULL_FIXED = {
    "float": "float32",
    **dict.fromkeys(("double", "double precision", "real"), "float64"),
    **dict.fromkeys(("boolean", "bool"), "bool"),
    **dict.fromkeys(("date", "datetime", "timestamp"), "time.Time"),
    **dict.fromkeys(
        ("binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"),
        "[]byte",
    ),
    **dict.fromkeys(("numeric", "decimal", "dec", "fixed"), "types.Decimal"),
    "json": "types.JSON",
}

# db type -> (signed, unsigned) base names
_INTEGERS = {
    "tinyint": ("int8", "uint8"),
    "smallint": ("int16", "uint16"),
    "mediumint": ("int32", "uint32"),
    "int": ("int", "uint"),
    "integer": ("int", "uint"),
    "bigint": ("int64", "uint64"),
}


def _null_name(base: str) -> str:
    return "null." + base[0].upper() + base[1:]


@dataclass
class MySQLTypeMapper:
    """Maps MySQL column types to the types used in generated code."""

    add_enum_types: bool = False
    enum_null_prefix: str = "Null"
    tiny_int_as_int: bool = False

    def __post_init__(self) -> None:
        self.enum_null_prefix = _title_case(self.enum_null_prefix)

    def translate_column_type(self, column: Column) -> Column:
        """Always fails: enum types need the table name."""
        raise RuntimeError("translate_table_column_type should be called")

    def translate_table_column_type(self, column: Column, table_name: str) -> Column:
        """Return a copy of ``column`` with its generated-code type filled in."""
        unsigned = "unsigned" in column.full_db_type
        db_type = column.db_type
        nullable = column.nullable

        if (
            db_type == "tinyint"
            and not self.tiny_int_as_int
            and column.full_db_type == "tinyint(1)"
        ):
            typ = "null.Bool" if nullable else "bool"
        elif db_type in _INTEGERS:
            base = _INTEGERS[db_type][1 if unsigned else 0]
            typ = _null_name(base) if nullable else base
        elif db_type in (_NULLABLE_FIXED if nullable else _NOT_NULL_FIXED):
            typ = (_NULLABLE_FIXED if nullable else _NOT_NULL_FIXED)[db_type]
        elif _parse_enum_vals(db_type) and self.add_enum_types:
            prefix = self.enum_null_prefix if nullable else ""
            typ = _title_case(table_name) + prefix + _title_case(column.name)
        else:
            typ = "null.String" if nullable else "string"

        return dataclasses.replace(column, type=typ)


def imports() -> Collection:
    """Return the imports needed by code generated for MySQL."""
    null_types = (
        "null.Float32",
        "null.Float64",
        "null.Int",
        "null.Int8",
        "null.Int16",
        "null.Int32",
        "null.Int64",
        "null.Uint",
        "null.Uint8",
        "null.Uint16",
        "null.Uint32",
        "null.Uint64",
        "null.String",
        "null.Bool",
        "null.Time",
        "null.Bytes",
        "null.JSON",
    )
    based_on_type = {name: ImportSet(third_party=[_NULL_PKG]) for name in null_types}
    based_on_type["time.Time"] = ImportSet(standard=['"time"'])
    for name in ("types.JSON", "types.Decimal", "types.NullDecimal"):
        based_on_type[name] = ImportSet(third_party=[_TYPES_PKG])

    return Collection(
        all=ImportSet(standard=['"strconv"']),
        singleton={
            "mysql_upsert": ImportSet(
                standard=['"fmt"', '"strings"'],
                third_party=[
                    '"github.com/volatiletech/strmangle"',
                    '"github.com/volatiletech/sqlboiler/v4/drivers"',
                ],
            ),
        },
        test_singleton={
            "mysql_suites_test": ImportSet(standard=['"testing"']),
            "mysql_main_test": ImportSet(
                standard=[
                    '"bytes"',
                    '"database/sql"',
                    '"fmt"',
                    '"io"',
                    '"io/ioutil"',
                    '"os"',
                    '"os/exec"',
                    '"regexp"',
                    '"strings"',
                ],
                third_party=[
                    '"github.com/kat-co/vala"',
                    '"github.com/friendsofgo/errors"',
                    '"github.com/spf13/viper"',
                    '"github.com/volatiletech/sqlboiler/v4/drivers/sqlboiler-mysql/driver"',
                    '"github.com/volatiletech/randomize"',
                    '_ "github.com/go-sql-driver/mysql"',
                ],
            ),
        },
        based_on_type=based_on_type,
    )