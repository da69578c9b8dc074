"""Schema inspection for SQLite databases."""

from __future__ import annotations

import dataclasses
import sqlite3
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from schemaboil.importers import Collection, ImportSet
from schemaboil.schema import Column, ForeignKey, PrimaryKey, ViewCapabilities

_NULL_PKG = '"github.com/volatiletech/null/v8"'
_TYPES_PKG = '"github.com/volatiletech/sqlboiler/v4/types"'

_NULLABLE_TYPES = {
    **dict.fromkeys(("INT", "INTEGER", "BIGINT"), "null.Int64"),
    **dict.fromkeys(("TINYINT", "INT8"), "null.Int8"),
    **dict.fromkeys(("SMALLINT", "INT2"), "null.Int16"),
    "MEDIUMINT": "null.Int32",
    "UNSIGNED BIG INT": "null.Uint64",
    **dict.fromkeys(
        (
            "CHARACTER",
            "VARCHAR",
            "VARYING CHARACTER",
            "NCHAR",
            "NATIVE CHARACTER",
            "NVARCHAR",
            "TEXT",
            "CLOB",
        ),
        "null.String",
    ),
    "BLOB": "null.Bytes",
    "FLOAT": "null.Float32",
    **dict.fromkeys(("REAL", "DOUBLE", "DOUBLE PRECISION"), "null.Float64"),
    **dict.fromkeys(("NUMERIC", "DECIMAL"), "types.NullDecimal"),
    "BOOLEAN": "null.Bool",
    **dict.fromkeys(("DATE", "DATETIME"), "null.Time"),
    "JSON": "null.JSON",
}

_NOT_NULL_TYPES = {
    **dict.fromkeys(("INT", "INTEGER", "BIGINT"), "int64"),
    **dict.fromkeys(("TINYINT", "INT8"), "int8"),
    **dict.fromkeys(("SMALLINT", "INT2"), "int16"),
    "MEDIUMINT": "int32",
    "UNSIGNED BIG INT": "uint64",
    **dict.fromkeys(
        (
            "CHARACTER",
            "VARCHAR",
            "VARYING CHARACTER",
            "NCHAR",
            "NATIVE CHARACTER",
            "NVARCHAR",
            "TEXT",
            "CLOB",
        ),
        "string",
    ),
    "BLOB": "[]byte",
    "FLOAT": "float32",
    **dict.fromkeys(("REAL", "DOUBLE", "DOUBLE PRECISION"), "float64"),
    **dict.fromkeys(("NUMERIC", "DECIMAL"), "types.Decimal"),
    "BOOLEAN": "bool",
    **dict.fromkeys(("DATE", "DATETIME"), "time.Time"),
    "JSON": "types.JSON",
}


def build_query_string(file: str) -> str:
    """Return the read-only connection URI for the database file."""
    return f"file:{file}?_loc=UTC&mode=ro"


def _tables_from_list(entries: Iterable[str] | None) -> list[str]:
    """Entries without a dot name whole tables."""
    return [entry for entry in entries or () if "." not in entry]


def _columns_from_list(entries: Iterable[str] | None, table_name: str) -> list[str]:
    """Entries of the form table.column (or *.column) that apply to ``table_name``."""
    columns = []
    for entry in entries or ():
        parts = entry.split(".")
        if len(parts) == 2 and parts[0] in (table_name, "*"):
            columns.append(parts[1])
    return columns


def _quote(name: str) -> str:
    return "'" + name.replace("'", "''") + "'"


@dataclass
class _Index:
    name: str
    unique: int
    partial: int
    columns: list[Optional[str]] = field(default_factory=list)


@dataclass
class _ColumnInfo:
    name: str
    type: str
    not_null: bool
    default_value: Optional[str]
    pk: int
    hidden: int


class SQLiteDriver:
    """Reads tables, views, columns and keys from an SQLite database file."""

    def __init__(self, dbname: str) -> None:
        self.conn_str = build_query_string(dbname)
        self._conn = sqlite3.connect(self.conn_str, uri=True)

    def __enter__(self) -> SQLiteDriver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _names(
        self, kind: str, whitelist: Sequence[str], blacklist: Sequence[str]
    ) -> list[str]:
        query = f"SELECT name FROM sqlite_master WHERE type='{kind}'"
        args: list[str] = []
        for names, operator in (
            (_tables_from_list(whitelist), "in"),
            (_tables_from_list(blacklist), "not in"),
        ):
            if names:
                placeholders = ",".join("?" * len(names))
                query += f" and tbl_name {operator} ({placeholders})"
                args.extend(names)
        rows = self._conn.execute(query, args).fetchall()
        return [name for (name,) in rows if name != "sqlite_sequence"]

    def table_names(
        self, whitelist: Sequence[str] = (), blacklist: Sequence[str] = ()
    ) -> list[str]:
        """Return the names of all tables, filtered by the white and black lists."""
        return self._names("table", whitelist, blacklist)

    def view_names(
        self, whitelist: Sequence[str] = (), blacklist: Sequence[str] = ()
    ) -> list[str]:
        """Return the names of all views, filtered by the white and black lists."""
        return self._names("view", whitelist, blacklist)

    def view_capabilities(self, name: str) -> ViewCapabilities:
        """Views are treated as read only."""
        return ViewCapabilities(can_insert=False, can_upsert=False)

    def _table_info(self, table_name: str) -> list[_ColumnInfo]:
        rows = self._conn.execute(f"PRAGMA table_xinfo({_quote(table_name)})")
        return [
            _ColumnInfo(
                name=name,
                type=typ,
                not_null=bool(not_null),
                default_value=None if default is None else str(default),
                pk=pk,
                hidden=hidden,
            )
            for _cid, name, typ, not_null, default, pk, hidden in rows.fetchall()
        ]

    def _indexes(self, table_name: str) -> list[_Index]:
        indexes = []
        rows = self._conn.execute(f"PRAGMA index_list({_quote(table_name)})")
        for _seq, name, unique, _origin, partial in rows.fetchall():
            info = self._conn.execute(f"PRAGMA index_info({_quote(name)})")
            columns = [col_name for _rank_index, _rank_table, col_name in info]
            indexes.append(_Index(name, unique, partial, columns))
        return indexes

    def columns(
        self,
        table_name: str,
        whitelist: Sequence[str] = (),
        blacklist: Sequence[str] = (),
    ) -> list[Column]:
        """Return the columns of a table, filtered by the white and black lists."""
        indexes = self._indexes(table_name)
        table_info = self._table_info(table_name)
        has_autoincrement = (
            self._conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? "
                "AND sql LIKE '%AUTOINCREMENT%'",
                (table_name,),
            ).fetchone()
            is not None
        )

        white_columns = _columns_from_list(whitelist, table_name) if whitelist else []
        black_columns = _columns_from_list(blacklist, table_name) if blacklist else []
        pkey_count = sum(1 for info in table_info if info.pk == 1)

        columns = []
        for info in table_info:
            if whitelist:
                if info.name not in white_columns:
                    continue
            elif blacklist and info.name in black_columns:
                continue

            column = Column(
                name=info.name,
                full_db_type=info.type.upper(),
                db_type=info.type.upper(),
                nullable=not info.not_null,
            )

            for index in indexes:
                # A unique index over several columns makes none of them unique.
                if len(index.columns) > 1:
                    continue
                if info.name in index.columns:
                    column.unique = index.unique > 0 and index.partial == 0

            # An INTEGER primary key is an alias of ROWID and auto-increments.
            integer_pkey = info.pk == 1 and column.full_db_type == "INTEGER"
            auto_increment = integer_pkey and (has_autoincrement or pkey_count == 1)
            column.auto_generated = auto_increment or info.hidden in (2, 3)

            if info.default_value is not None:
                column.default = info.default_value
            elif auto_increment:
                column.default = "auto_increment"
            elif column.auto_generated:
                column.default = "auto_generated"

            if column.nullable and column.default == "":
                column.default = "NULL"

            columns.append(column)
        return columns

    def view_columns(
        self,
        table_name: str,
        whitelist: Sequence[str] = (),
        blacklist: Sequence[str] = (),
    ) -> list[Column]:
        """Return the columns of a view."""
        return self.columns(table_name, whitelist, blacklist)

    def primary_key_info(self, table_name: str) -> Optional[PrimaryKey]:
        """Return the primary key of a table, or None if it has none."""
        columns = [info.name for info in self._table_info(table_name) if info.pk > 0]
        return PrimaryKey(columns=columns) if columns else None

    def foreign_key_info(self, table_name: str) -> list[ForeignKey]:
        """Return the foreign keys declared on a table."""
        rows = self._conn.execute(f"PRAGMA foreign_key_list({_quote(table_name)})")
        return [
            ForeignKey(
                table=table_name,
                name=f"FK_{fk_id}",
                column=column,
                foreign_table=foreign_table,
                foreign_column=foreign_column or "",
            )
            for fk_id, _seq, foreign_table, column, foreign_column, *_rest in rows
        ]


def translate_column_type(column: Column) -> Column:
    """Return a copy of ``column`` with its generated-code type filled in."""
    if column.nullable:
        typ = _NULLABLE_TYPES.get(column.db_type.split("(")[0], "null.String")
    else:
        typ = _NOT_NULL_TYPES.get(column.db_type, "string")
    return dataclasses.replace(column, type=typ)


def imports() -> Collection:
    """Return the imports needed by code generated for SQLite."""
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
    for name in ("types.Decimal", "types.NullDecimal", "types.JSON"):
        based_on_type[name] = ImportSet(third_party=[_TYPES_PKG])

    return Collection(
        all=ImportSet(standard=['"strconv"']),
        singleton={
            "sqlite_upsert": ImportSet(
                standard=['"fmt"', '"strings"'],
                third_party=[
                    '"github.com/volatiletech/strmangle"',
                    '"github.com/volatiletech/sqlboiler/v4/drivers"',
                ],
            ),
        },
        test_singleton={
            "sqlite3_suites_test": ImportSet(standard=['"testing"']),
            "sqlite3_main_test": ImportSet(
                standard=[
                    '"database/sql"',
                    '"fmt"',
                    '"io"',
                    '"math/rand"',
                    '"os"',
                    '"os/exec"',
                    '"path/filepath"',
                    '"regexp"',
                ],
                third_party=[
                    '"github.com/pkg/errors"',
                    '"github.com/spf13/viper"',
                    '_ "modernc.org/sqlite"',
                ],
            ),
        },
        based_on_type=based_on_type,
    )