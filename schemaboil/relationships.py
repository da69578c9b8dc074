"""Relationships between tables derived from their foreign keys."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from schemaboil.schema import ForeignKey, Table, get_table


@dataclass
class ToOneRelationship:
    """A one-to-one relationship: a unique foreign key points at the local table."""

    name: str = ""
    table: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False


@dataclass
class ToManyRelationship:
    """A one-to-many relationship, possibly through a join table."""

    name: str = ""
    table: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False
    to_join_table: bool = False
    join_table: str = ""
    join_local_fkey_name: str = ""
    join_local_column: str = ""
    join_local_column_nullable: bool = False
    join_local_column_unique: bool = False
    join_foreign_fkey_name: str = ""
    join_foreign_column: str = ""
    join_foreign_column_nullable: bool = False
    join_foreign_column_unique: bool = False


def to_one_relationships(table: str, tables: Sequence[Table]) -> list[ToOneRelationship]:
    """Return the to-one relationships of the table called ``table``."""
    local = get_table(tables, table)
    return [
        _build_to_one(local, fkey, other)
        for other in tables
        for fkey in other.fkeys
        if fkey.foreign_table == local.name and not other.is_join_table and fkey.unique
    ]


def to_many_relationships(
    table: str, tables: Sequence[Table]
) -> list[ToManyRelationship]:
    """Return the to-many relationships of the table called ``table``."""
    local = get_table(tables, table)
    return [
        _build_to_many(local, fkey, other)
        for other in tables
        for fkey in other.fkeys
        if fkey.foreign_table == local.name and (other.is_join_table or not fkey.unique)
    ]


def _build_to_one(local: Table, fkey: ForeignKey, foreign: Table) -> ToOneRelationship:
    return ToOneRelationship(
        name=fkey.name,
        table=local.name,
        column=fkey.foreign_column,
        nullable=fkey.foreign_column_nullable,
        unique=fkey.foreign_column_unique,
        foreign_table=foreign.name,
        foreign_column=fkey.column,
        foreign_column_nullable=fkey.nullable,
        foreign_column_unique=fkey.unique,
    )


def _build_to_many(
    local: Table, fkey: ForeignKey, foreign: Table
) -> ToManyRelationship:
    if not foreign.is_join_table:
        return ToManyRelationship(
            name=fkey.name,
            table=local.name,
            column=fkey.foreign_column,
            nullable=fkey.foreign_column_nullable,
            unique=fkey.foreign_column_unique,
            foreign_table=foreign.name,
            foreign_column=fkey.column,
            foreign_column_nullable=fkey.nullable,
            foreign_column_unique=fkey.unique,
            to_join_table=False,
        )

    relationship = ToManyRelationship(
        table=local.name,
        column=fkey.foreign_column,
        nullable=fkey.foreign_column_nullable,
        unique=fkey.foreign_column_unique,
        to_join_table=True,
        join_table=foreign.name,
        join_local_fkey_name=fkey.name,
        join_local_column=fkey.column,
        join_local_column_nullable=fkey.nullable,
        join_local_column_unique=fkey.unique,
    )

    # The other key of the join table leads to the far side; the last one wins.
    for other in foreign.fkeys:
        if other.name == fkey.name:
            continue
        relationship.join_foreign_fkey_name = other.name
        relationship.join_foreign_column = other.column
        relationship.join_foreign_column_nullable = other.nullable
        relationship.join_foreign_column_unique = other.unique
        relationship.foreign_table = other.foreign_table
        relationship.foreign_column = other.foreign_column
        relationship.foreign_column_nullable = other.foreign_column_nullable
        relationship.foreign_column_unique = other.foreign_column_unique

    return relationship