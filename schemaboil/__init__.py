"""Schema introspection, Go type mapping and import sets for ORM code generation."""

__version__ = "4.12.0"

__all__ = [
    "importers",
    "mysql",
    "mysql_types",
    "psql_types",
    "relationships",
    "schema",
    "sqlite",
]