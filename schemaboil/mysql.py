"""Schema inspection for MySQL databases through a DB-API connection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Optional

from schemaboil.schema import Column, ForeignKey, PrimaryKey, ViewCapabilities
from schemaboil.sqlite import _columns_from_list, _tables_from_list

_PARAMSTYLES = frozenset({"qmark", "format", "pyformat"})

_COLUMNS_QUERY = r"""
	select
	c.column_name,
	c.column_type,
	c.column_comment,
	if(c.data_type = 'enum', c.column_type, c.data_type),
	if(extra = 'auto_increment','auto_increment',
		if(version() like '%MariaDB%' and c.column_default = 'NULL', '',
		if(version() like '%MariaDB%' and c.data_type in ('varchar','char','binary','date','datetime','time'),
			replace(substring(c.column_default,2,length(c.column_default)-2),'\'\'','\''),
				c.column_default))),
	c.is_nullable = 'YES',
	(c.extra = 'STORED GENERATED' OR c.extra = 'VIRTUAL GENERATED') is_generated,
		exists (
			select c.column_name
			from information_schema.table_constraints tc
			inner join information_schema.key_column_usage kcu
				on tc.constraint_name = kcu.constraint_name
			where tc.table_name = ? and kcu.table_name = ? and tc.table_schema = ? and kcu.table_schema = ? and
				c.column_name = kcu.column_name and
				(tc.constraint_type = 'PRIMARY KEY' or tc.constraint_type = 'UNIQUE') and
				(select count(*) from information_schema.key_column_usage where table_schema = ? and
				constraint_schema = ? and table_name = ? and constraint_name = tc.constraint_name) = 1
		) as is_unique
	from information_schema.columns as c
	where table_name = ? and table_schema = ?"""

_PKEY_NAME_QUERY = """
	select tc.constraint_name
	from information_schema.table_constraints as tc
	where tc.table_name = ? and tc.constraint_type = 'PRIMARY KEY' and tc.table_schema = ?;"""

_PKEY_COLUMNS_QUERY = """
	select kcu.column_name
	from   information_schema.key_column_usage as kcu
	where  table_name = ? and constraint_name = ? and table_schema = ?
	order by kcu.ordinal_position;"""

_FKEY_QUERY = """
	select constraint_name, table_name, column_name, referenced_table_name, referenced_column_name
	from information_schema.key_column_usage
	where table_schema = ? and referenced_table_schema = ? and table_name = ?
	order by constraint_name, table_name, column_name, referenced_table_name, referenced_column_name
	"""


def _text(value: Any) -> Any:
    """Decode byte strings some client libraries return for text columns."""
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value


def _placeholders(count: int) -> str:
    return ",".join("?" * count)


class MySQLDriver:
    """Reads tables, views, columns and keys from a MySQL information_schema.

    ``conn`` is any DB-API 2.0 connection; ``paramstyle`` is the parameter
    style of its module (``qmark``, ``format`` or ``pyformat``).
    """

    def __init__(self, conn: Any, paramstyle: str = "format") -> None:
        if paramstyle not in _PARAMSTYLES:
            raise ValueError(f"unsupported paramstyle: {paramstyle}")
        self._conn = conn
        self._paramstyle = paramstyle

    def _query(self, query: str, args: Iterable[Any] = ()) -> list[tuple]:
        if self._paramstyle != "qmark":
            query = query.replace("%", "%%").replace("?", "%s")
        cursor = self._conn.cursor()
        try:
            cursor.execute(query, tuple(args))
            return [tuple(_text(value) for value in row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def _names(
        self,
        query: str,
        schema: str,
        whitelist: Sequence[str],
        blacklist: Sequence[str],
    ) -> list[str]:
        args: list[Any] = [schema]
        if whitelist:
            tables = _tables_from_list(whitelist)
            if tables:
                query += f" and table_name in ({_placeholders(len(tables))})"
                args.extend(tables)
        elif blacklist:
            tables = _tables_from_list(blacklist)
            if tables:
                query += f" and table_name not in ({_placeholders(len(tables))})"
                args.extend(tables)
        query += " order by table_name;"
        return [name for (name, *_rest) in self._query(query, args)]

    def table_names(
        self,
        schema: str,
        whitelist: Sequence[str] = (),
        blacklist: Sequence[str] = (),
    ) -> list[str]:
        """Return the base tables of ``schema``, filtered by the white or black list."""
        return self._names(
            "select table_name from information_schema.tables "
            "where table_schema = ? and table_type = 'BASE TABLE'",
            schema,
            whitelist,
            blacklist,
        )

    def view_names(
        self,
        schema: str,
        whitelist: Sequence[str] = (),
        blacklist: Sequence[str] = (),
    ) -> list[str]:
        """Return the views of ``schema``, filtered by the white or black list."""
        return self._names(
            "select table_name from information_schema.views where table_schema = ?",
            schema,
            whitelist,
            blacklist,
        )

    def view_capabilities(self, schema: str, name: str) -> ViewCapabilities:
        """Views are treated as read only: insertability cannot be determined."""
        return ViewCapabilities(can_insert=False, can_upsert=False)

    def columns(
        self,
        schema: str,
        table_name: str,
        whitelist: Sequence[str] = (),
        blacklist: Sequence[str] = (),
    ) -> list[Column]:
        """Return the columns of a table, filtered by the white or black list."""
        query = _COLUMNS_QUERY
        args: list[Any] = [
            table_name,
            table_name,
            schema,
            schema,
            schema,
            schema,
            table_name,
            table_name,
            schema,
        ]
        if whitelist:
            names = _columns_from_list(whitelist, table_name)
            if names:
                query += f" and c.column_name in ({_placeholders(len(names))})"
                args.extend(names)
        elif blacklist:
            names = _columns_from_list(blacklist, table_name)
            if names:
                query += f" and c.column_name not in ({_placeholders(len(names))})"
                args.extend(names)
        query += " order by c.ordinal_position;"

        columns = []
        for row in self._query(query, args):
            name, full_type, comment, db_type, default, nullable, generated, unique = row
            column = Column(
                name=name,
                comment=comment or "",
                full_db_type=full_type,
                db_type=db_type,
                nullable=bool(nullable),
                unique=bool(unique),
                auto_generated=bool(generated),
            )
            if default is not None:
                column.default = str(default)
            # A generated column technically has a default value.
            if column.default == "" and column.auto_generated:
                column.default = "AUTO_GENERATED"
            columns.append(column)
        return columns

    def view_columns(
        self,
        schema: str,
        table_name: str,
        whitelist: Sequence[str] = (),
        blacklist: Sequence[str] = (),
    ) -> list[Column]:
        """Return the columns of a view."""
        return self.columns(schema, table_name, whitelist, blacklist)

    def primary_key_info(self, schema: str, table_name: str) -> Optional[PrimaryKey]:
        """Return the primary key of a table, or None if it has none."""
        rows = self._query(_PKEY_NAME_QUERY, (table_name, schema))
        if not rows:
            return None
        name = rows[0][0]
        column_rows = self._query(_PKEY_COLUMNS_QUERY, (table_name, name, schema))
        return PrimaryKey(name=name, columns=[column for (column, *_rest) in column_rows])

    def foreign_key_info(self, schema: str, table_name: str) -> list[ForeignKey]:
        """Return the foreign keys declared on a table."""
        rows = self._query(_FKEY_QUERY, (schema, schema, table_name))
        return [
            ForeignKey(
                table=table_name,
                name=name,
                column=column,
                foreign_table=foreign_table,
                foreign_column=foreign_column,
            )
            for name, _source_table, column, foreign_table, foreign_column in rows
        ]