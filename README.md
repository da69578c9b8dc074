# schemaboil

`schemaboil` reads the structure of a relational database and turns it into
the metadata an ORM code generator needs: tables, columns, primary and
foreign keys, views, the relationships between tables, the Go type each
column maps to, and the import blocks the generated Go files require.

It has no runtime dependencies beyond the Python standard library.

## What is inside

- `schemaboil.schema` – the schema model: `Column`, `ForeignKey`,
  `PrimaryKey`, `ViewCapabilities` and `Table`. `get_table` and
  `Table.get_column` look up by name and raise `LookupError` when the name
  is missing. `Table.can_last_insert_id` is true for a single-column primary
  key with a default and an integer Go type; `Table.can_soft_delete` is true
  when the table has a `null.Time` column of the given name (`deleted_at`
  when the name is empty).
- `schemaboil.relationships` – `to_one_relationships` and
  `to_many_relationships` build `ToOneRelationship` and
  `ToManyRelationship` entries for a table from the foreign keys of all
  tables, including many-to-many relationships through join tables.
- `schemaboil.importers` – import sets for generated Go code: `ImportSet`,
  `Collection`, `new_default_imports`, `nullable_enum_imports`,
  `add_type_imports`, `merge`, `merge_set`, `combine_string_slices` and
  `sort_imports`, plus loading from loosely typed configuration with
  `set_from_interface` and `map_from_interface`. `ImportSet.format` renders
  a Go `import` declaration.
- `schemaboil.sqlite` – `SQLiteDriver` opens an SQLite file read-only and
  reports table and view names, columns, primary and foreign keys. Also
  `translate_column_type`, `build_query_string` and `imports` for SQLite.
- `schemaboil.mysql` – `MySQLDriver` reads the same information from MySQL's
  `information_schema` through any DB-API 2.0 connection you pass in, with
  its `paramstyle` (`qmark`, `format` or `pyformat`).
- `schemaboil.mysql_types` – `MySQLTypeMapper` (options `add_enum_types`,
  `enum_null_prefix`, `tiny_int_as_int`) translates MySQL types with
  `translate_table_column_type`, including `tinyint(1)` as bool, unsigned
  integers and optional enum types. `translate_column_type` always raises
  `RuntimeError`, because enum names need the table name. Also
  `build_query_string` and `imports`.
- `schemaboil.psql_types` – `PostgresTypeMapper` (options `add_enum_types`,
  `enum_null_prefix`) translates PostgreSQL types, including arrays
  (`get_array_type`), `hstore`, `citext`, geometric types and enums. Also
  `build_query_string` and `imports`.

## Examples

Inspecting an SQLite file:

```python
from schemaboil.sqlite import SQLiteDriver, translate_column_type

with SQLiteDriver("app.db") as driver:
    for name in driver.table_names():
        columns = [translate_column_type(c) for c in driver.columns(name)]
        print(name, [(c.name, c.type) for c in columns])
```

Combining the default imports with those a dialect contributes and
rendering an import block:

```python
from schemaboil import importers, sqlite

collection = importers.merge(importers.new_default_imports(), sqlite.imports())
print(collection.all.format())
```

Finding the relationships of a table once the schema is loaded:

```python
from schemaboil.relationships import to_many_relationships

for rel in to_many_relationships("pilots", tables):
    print(rel.foreign_table, rel.to_join_table)
```

Connection strings:

```python
from schemaboil import mysql_types, psql_types, sqlite

password = "password"
sqlite.build_query_string("app.db")
# 'file:app.db?_loc=UTC&mode=ro'
mysql_types.build_query_string("user", password, "app", "localhost", 3306, "true")
# 'user:password@tcp(localhost:3306)/app?parseTime=true&tls=true'
psql_types.build_query_string("user", password, "app", "localhost", 5432, "require")
# 'user=user password=password dbname=app host=localhost port=5432 sslmode=require'
```

## Behaviour worth knowing

- Import lists are sorted ignoring a leading `_` and spaces, so
  `_ "github.com/lib/pq"` sorts as `"github.com/lib/pq"`.
- Whitelists and blacklists take plain table names, which filter tables,
  and `table.column` or `*.column` entries, which filter columns. The SQLite
  driver applies both lists; the MySQL driver uses the blacklist only when
  there is no whitelist.

## What it does not do

- There is no PostgreSQL introspection: for PostgreSQL the package offers
  type mapping, connection strings and imports only.
- There is no command-line tool, and no templates: the package gathers the
  metadata and import sets, but does not write generated Go files.

## Running the tests

```
pip install -e ".[test]"
pytest
```