"""Type mapping, connection strings and imports for PostgreSQL databases."""

from __future__ import annotations

import dataclasses
import re
import sys
from dataclasses import dataclass

from schemaboil.importers import Collection, ImportSet
from schemaboil.mysql_types import _title_case
from schemaboil.schema import Column

DEFAULT_PORT = 5432

_NULL_PKG = '"github.com/volatiletech/null/v8"'
_TYPES_PKG = '"github.com/volatiletech/sqlboiler/v4/types"'
_PGEO_PKG = '"github.com/volatiletech/sqlboiler/v4/types/pgeo"'

_ENUM_RE = re.compile(r"^enum(\.\w+)?\([^)]+\)$")

_STRING_DB_TYPES = (
    "bit",
    "interval",
    "bit varying",
    "character",
    "money",
    "character varying",
    "cidr",
    "inet",
    "macaddr",
    "text",
    "uuid",
    "xml",
)

_TIME_DB_TYPES = (
    "date",
    "time",
    "timestamp without time zone",
    "timestamp with time zone",
    "time without time zone",
    "time with time zone",
)

_GEOMETRY = {
    "point": "Point",
    "line": "Line",
    "lseg": "Lseg",
    "box": "Box",
    "path": "Path",
    "polygon": "Polygon",
    "circle": "Circle",
}

_NULLABLE_FIXED = {
    **dict.fromkeys(("bigint", "bigserial"), "null.Int64"),
    **dict.fromkeys(("integer", "serial"), "null.Int"),
    "oid": "null.Uint32",
    **dict.fromkeys(("smallint", "smallserial"), "null.Int16"),
    **dict.fromkeys(("decimal", "numeric"), "types.NullDecimal"),
    "double precision": "null.Float64",
    "real": "null.Float32",
    **dict.fromkeys(_STRING_DB_TYPES, "null.String"),
    '"char"': "null.Byte",
    "bytea": "null.Bytes",
    **dict.fromkeys(("json", "jsonb"), "null.JSON"),
    "boolean": "null.Bool",
    **dict.fromkeys(_TIME_DB_TYPES, "null.Time"),
    **{db: f"pgeo.Null{name}" for db, name in _GEOMETRY.items()},
}

_NOT_NULL_FIXED = {
    **dict.fromkeys(("bigint", "bigserial"), "int64"),
    **dict.fromkeys(("integer", "serial"), "int"),
    "oid": "uint32",
    **dict.fromkeys(("smallint", "smallserial"), "int16"),
    **dict.fromkeys(("decimal", "numeric"), "types.Decimal"),
    "double precision": "float64",
    "real": "float32",
    **dict.fromkeys(("uuint", *_STRING_DB_TYPES), "string"),
    '"char"': "types.Byte",
    **dict.fromkeys(("json", "jsonb"), "types.JSON"),
    "bytea": "[]byte",
    "boolean": "bool",
    **dict.fromkeys(_TIME_DB_TYPES, "time.Time"),
    **{db: f"pgeo.{name}" for db, name in _GEOMETRY.items()},
}

_ARRAY_BY_ELEMENT = {
    **dict.fromkeys(
        (
            "bigint",
            "bigserial",
            "integer",
            "serial",
            "smallint",
            "smallserial",
            "oid",
        ),
        "types.Int64Array",
    ),
    "bytea": "types.BytesArray",
    **dict.fromkeys(("uuint", *_STRING_DB_TYPES), "types.StringArray"),
    "boolean": "types.BoolArray",
    **dict.fromkeys(("decimal", "numeric"), "types.DecimalArray"),
    **dict.fromkeys(("double precision", "real"), "types.Float64Array"),
}

_ARRAY_BY_UDT = {
    **dict.fromkeys(("_int4", "_int8"), "types.Int64Array"),
    "_bytea": "types.BytesArray",
    **dict.fromkeys(
        (
            "_bit",
            "_interval",
            "_varbit",
            "_char",
            "_money",
            "_varchar",
            "_cidr",
            "_inet",
            "_macaddr",
            "_citext",
            "_text",
            "_uuid",
            "_xml",
        ),
        "types.StringArray",
    ),
    "_bool": "types.BoolArray",
    "_numeric": "types.DecimalArray",
    **dict.fromkeys(("_float4", "_float8"), "types.Float64Array"),
}


def _parse_enum_name(db_type: str) -> str:
    """Name of an enum type such as ``enum.mood('a','b')``; empty otherwise."""
    match = _ENUM_RE.match(db_type)
    if not match or not match.group(1):
        return ""
    return match.group(1)[1:]


def build_query_string(
    user: str, password: str, dbname: str, host: str, port: int, sslmode: str
) -> str:
    """Build a key=value connection string, leaving out empty settings."""
    settings = (
        ("user", user),
        ("password", password),
        ("dbname", dbname),
        ("host", host),
        ("port", str(port) if port else ""),
        ("sslmode", sslmode),
    )
    return " ".join(f"{key}={value}" for key, value in settings if value)


def get_array_type(column: Column) -> tuple[str, str]:
    """Return the array type of generated code and the element database type.

    Domains over arrays report no element type; their udt name (the element
    type with a leading underscore) is used instead.
    """
    if column.arr_type is not None:
        return (
            _ARRAY_BY_ELEMENT.get(column.arr_type, "types.StringArray"),
            column.arr_type,
        )
    return _ARRAY_BY_UDT.get(column.udt_name, "types.StringArray"), column.udt_name


@dataclass
class PostgresTypeMapper:
    """Maps PostgreSQL column types to the types used in generated code."""

    add_enum_types: bool = False
    enum_null_prefix: str = "Null"

    def __post_init__(self) -> None:
        self.enum_null_prefix = _title_case(self.enum_null_prefix)

    def translate_column_type(self, column: Column) -> Column:
        """Return a copy of ``column`` with its generated-code type filled in."""
        nullable = column.nullable
        db_type = column.db_type
        fixed = _NULLABLE_FIXED if nullable else _NOT_NULL_FIXED

        if db_type in fixed:
            return dataclasses.replace(column, type=fixed[db_type])

        if db_type == "ARRAY":
            typ, element = get_array_type(column)
            # ARRAYinteger and the like, for random value generation.
            return dataclasses.replace(column, type=typ, db_type=db_type + element)

        if db_type == "USER-DEFINED":
            if column.udt_name == "hstore":
                return dataclasses.replace(column, type="types.HStore", db_type="hstore")
            if column.udt_name == "citext":
                return dataclasses.replace(
                    column, type="null.String" if nullable else "string"
                )
            print(
                f"warning: incompatible data type detected: {column.udt_name}",
                file=sys.stderr,
            )
            return dataclasses.replace(column, type="string")

        enum_name = _parse_enum_name(db_type)
        if enum_name and self.add_enum_types:
            prefix = self.enum_null_prefix if nullable else ""
            return dataclasses.replace(column, type=prefix + _title_case(enum_name))
        return dataclasses.replace(column, type="null.String" if nullable else "string")


def imports() -> Collection:
    """Return the imports needed by code generated for PostgreSQL."""
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
        "null.JSON",
        "null.Bytes",
    )
    types_types = (
        "types.JSON",
        "types.Decimal",
        "types.BytesArray",
        "types.Int64Array",
        "types.Float64Array",
        "types.BoolArray",
        "types.StringArray",
        "types.DecimalArray",
        "types.HStore",
        "types.NullDecimal",
    )
    pgeo_types = [f"pgeo.{name}" for name in _GEOMETRY.values()]
    pgeo_types += [f"pgeo.Null{name}" for name in _GEOMETRY.values()]

    based_on_type = {name: ImportSet(third_party=[_NULL_PKG]) for name in null_types}
    based_on_type["time.Time"] = ImportSet(standard=['"time"'])
    for name in types_types:
        based_on_type[name] = ImportSet(third_party=[_TYPES_PKG])
    for name in pgeo_types:
        based_on_type[name] = ImportSet(third_party=[_PGEO_PKG])

    return Collection(
        all=ImportSet(standard=['"strconv"']),
        singleton={
            "psql_upsert": ImportSet(
                standard=['"fmt"', '"strings"'],
                third_party=[
                    '"github.com/volatiletech/strmangle"',
                    '"github.com/volatiletech/sqlboiler/v4/drivers"',
                ],
            ),
        },
        test_singleton={
            "psql_suites_test": ImportSet(standard=['"testing"']),
            "psql_main_test": ImportSet(
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
                    '"github.com/volatiletech/sqlboiler/v4/drivers/sqlboiler-psql/driver"',
                    '"github.com/volatiletech/randomize"',
                    '_ "github.com/lib/pq"',
                ],
            ),
        },
        based_on_type=based_on_type,
    )