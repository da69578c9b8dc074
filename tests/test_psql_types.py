import pytest

from schemaboil.psql_types import (
    PostgresTypeMapper,
    build_query_string,
    get_array_type,
    imports,
)
from schemaboil.schema import Column


def test_build_query_string_all_parts():
    password = "password"
    got = build_query_string("user", password, "db", "localhost", 5432, "require")
    assert got == "user=user password=password dbname=db host=localhost port=5432 sslmode=require"


def test_build_query_string_skips_empty_parts():
    password = ""
    got = build_query_string("", password, "db", "", 0, "")
    assert got == "dbname=db"


@pytest.mark.parametrize(
    "db_type,nullable,expected",
    [
        ("bigint", True, "null.Int64"),
        ("bigint", False, "int64"),
        ("integer", False, "int"),
        ("oid", True, "null.Uint32"),
        ("numeric", True, "types.NullDecimal"),
        ("numeric", False, "types.Decimal"),
        ("text", True, "null.String"),
        ('"char"', False, "types.Byte"),
        ('"char"', True, "null.Byte"),
        ("jsonb", False, "types.JSON"),
        ("bytea", False, "[]byte"),
        ("timestamp with time zone", True, "null.Time"),
        ("point", True, "pgeo.NullPoint"),
        ("circle", False, "pgeo.Circle"),
        ("uuint", False, "string"),
        ("uuint", True, "null.String"),
    ],
)
def test_translate_fixed_types(db_type, nullable, expected):
    column = Column(name="c", db_type=db_type, nullable=nullable)
    result = PostgresTypeMapper().translate_column_type(column)
    assert result.type == expected
    assert result.db_type == db_type
    assert column.type == ""


def test_translate_array_appends_element_type():
    column = Column(name="c", db_type="ARRAY", arr_type="integer")
    result = PostgresTypeMapper().translate_column_type(column)
    assert result.type == "types.Int64Array"
    assert result.db_type == "ARRAYinteger"


def test_get_array_type_uses_udt_name_without_element_type():
    column = Column(db_type="ARRAY", udt_name="_bool")
    assert get_array_type(column) == ("types.BoolArray", "_bool")


def test_get_array_type_defaults_to_string_array():
    assert get_array_type(Column(arr_type="mystery")) == ("types.StringArray", "mystery")
    assert get_array_type(Column(udt_name="_mystery")) == (
        "types.StringArray",
        "_mystery",
    )


def test_translate_hstore():
    column = Column(db_type="USER-DEFINED", udt_name="hstore", nullable=True)
    result = PostgresTypeMapper().translate_column_type(column)
    assert (result.type, result.db_type) == ("types.HStore", "hstore")


def test_translate_citext():
    mapper = PostgresTypeMapper()
    nullable = Column(db_type="USER-DEFINED", udt_name="citext", nullable=True)
    not_null = Column(db_type="USER-DEFINED", udt_name="citext")
    assert mapper.translate_column_type(nullable).type == "null.String"
    assert mapper.translate_column_type(not_null).type == "string"


def test_translate_unknown_user_defined_warns(capsys):
    column = Column(db_type="USER-DEFINED", udt_name="geometry", nullable=True)
    result = PostgresTypeMapper().translate_column_type(column)
    assert result.type == "string"
    assert "incompatible data type detected: geometry" in capsys.readouterr().err


def test_translate_enum_with_enum_types():
    mapper = PostgresTypeMapper(add_enum_types=True)
    db_type = "enum.workday('monday','tuesday')"
    assert mapper.translate_column_type(Column(db_type=db_type)).type == "Workday"
    nullable = Column(db_type=db_type, nullable=True)
    assert mapper.translate_column_type(nullable).type == "NullWorkday"


def test_translate_enum_custom_null_prefix_is_title_cased():
    mapper = PostgresTypeMapper(add_enum_types=True, enum_null_prefix="opt")
    column = Column(db_type="enum.workday('monday')", nullable=True)
    assert mapper.translate_column_type(column).type == "OptWorkday"


def test_translate_enum_without_enum_types():
    mapper = PostgresTypeMapper()
    column = Column(db_type="enum.workday('monday')", nullable=True)
    assert mapper.translate_column_type(column).type == "null.String"


def test_imports_based_on_type():
    col = imports()
    assert col.all.standard == ['"strconv"']
    assert col.based_on_type["time.Time"].standard == ['"time"']
    assert col.based_on_type["pgeo.NullCircle"].third_party == [
        '"github.com/volatiletech/sqlboiler/v4/types/pgeo"'
    ]
    assert col.based_on_type["types.HStore"].third_party == [
        '"github.com/volatiletech/sqlboiler/v4/types"'
    ]
    assert "psql_upsert" in col.singleton
    assert '_ "github.com/lib/pq"' in col.test_singleton["psql_main_test"].third_party