"""Schema metadata: tables, columns and keys as reported by a database driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

_INTEGER_TYPES = frozenset(
    {
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
    }
)

DEFAULT_DELETE_COLUMN = "deleted_at"


@dataclass
class Column:
    """A single column of a table or view."""

    name: str = ""
    type: str = ""
    db_type: str = ""
    full_db_type: str = ""
    default: str = ""
    comment: str = ""
    nullable: bool = False
    unique: bool = False
    auto_generated: bool = False
    arr_type: Optional[str] = None
    domain_name: Optional[str] = None
    udt_name: str = ""


@dataclass
class ForeignKey:
    """A foreign key from a column of one table to a column of another."""

    table: str = ""
    name: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False


@dataclass
class PrimaryKey:
    """The primary key constraint of a table."""

    name: str = ""
    columns: list[str] = field(default_factory=list)


@dataclass
class ViewCapabilities:
    """Which write operations a view supports."""

    can_insert: bool = False
    can_upsert: bool = False


@dataclass
class Table:
    """Table (or view) metadata from the database schema."""

    name: str = ""
    schema_name: str = ""
    columns: list[Column] = field(default_factory=list)
    pkey: Optional[PrimaryKey] = None
    fkeys: list[ForeignKey] = field(default_factory=list)
    is_join_table: bool = False
    to_one_relationships: list = field(default_factory=list)
    to_many_relationships: list = field(default_factory=list)
    is_view: bool = False
    view_capabilities: ViewCapabilities = field(default_factory=ViewCapabilities)

    def get_column(self, name: str) -> Column:
        """Return the column called ``name``; raise LookupError if absent."""
        for column in self.columns:
            if column.name == name:
                return column
        raise LookupError(f"could not find column name: {name}")

    def can_last_insert_id(self) -> bool:
        """True if the table has a single defaulted integer primary key column."""
        if self.pkey is None or len(self.pkey.columns) != 1:
            return False
        column = self.get_column(self.pkey.columns[0])
        if not column.default:
            return False
        return column.type in _INTEGER_TYPES

    def can_soft_delete(self, delete_column: str = "") -> bool:
        """True if the table has a nullable time column used for soft deletes."""
        delete_column = delete_column or DEFAULT_DELETE_COLUMN
        return any(
            column.name == delete_column and column.type == "null.Time"
            for column in self.columns
        )


def get_table(tables: list[Table], name: str) -> Table:
    """Return the table called ``name``; raise LookupError if absent."""
    for table in tables:
        if table.name == name:
            return table
    raise LookupError(f"could not find table name: {name}")