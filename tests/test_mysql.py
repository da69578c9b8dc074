import pytest

from schemaboil.mysql import MySQLDriver
from schemaboil.schema import Column, ForeignKey, PrimaryKey, ViewCapabilities


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.closed = False

    def execute(self, query, args):
        self.conn.executed.append((query, args))

    def fetchall(self):
        return self.conn.responses.pop(0)

    def close(self):
        self.closed = True
        self.conn.closed_cursors += 1


class FakeConnection:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.executed = []
        self.closed_cursors = 0

    def cursor(self):
        return FakeCursor(self)


def test_table_names_plain():
    conn = FakeConnection([("a",), ("b",)])
    driver = MySQLDriver(conn, paramstyle="qmark")
    assert driver.table_names("db") == ["a", "b"]
    query, args = conn.executed[0]
    assert "table_type = 'BASE TABLE'" in query
    assert query.endswith(" order by table_name;")
    assert args == ("db",)
    assert conn.closed_cursors == 1


def test_table_names_whitelist_ignores_column_entries():
    conn = FakeConnection([("videos",)])
    driver = MySQLDriver(conn, paramstyle="qmark")
    result = driver.table_names("db", ["videos", "users", "videos.id"], ["tags"])
    assert result == ["videos"]
    query, args = conn.executed[0]
    assert " and table_name in (?,?)" in query
    assert "not in" not in query
    assert args == ("db", "videos", "users")


def test_table_names_blacklist():
    conn = FakeConnection([])
    driver = MySQLDriver(conn, paramstyle="qmark")
    assert driver.table_names("db", [], ["tags"]) == []
    query, args = conn.executed[0]
    assert " and table_name not in (?)" in query
    assert args == ("db", "tags")


def test_view_names_format_paramstyle():
    conn = FakeConnection([(b"my_view",)])
    driver = MySQLDriver(conn)
    assert driver.view_names("db", ["my_view"]) == ["my_view"]
    query, args = conn.executed[0]
    assert "information_schema.views" in query
    assert "?" not in query
    assert "table_schema = %s and table_name in (%s)" in query
    assert args == ("db", "my_view")


def test_invalid_paramstyle():
    with pytest.raises(ValueError):
        MySQLDriver(FakeConnection(), paramstyle="named")


def test_view_capabilities_read_only():
    driver = MySQLDriver(FakeConnection())
    assert driver.view_capabilities("db", "v") == ViewCapabilities(False, False)


def _column_rows():
    return [
        ("id", "int(11)", "", "int", "auto_increment", 0, 0, 1),
        ("name", "varchar(255)", "the name", "varchar", None, 1, 0, 0),
        ("total", "int(11)", "", "int", None, 0, 1, 0),
    ]


def test_columns_rows():
    conn = FakeConnection(_column_rows())
    driver = MySQLDriver(conn, paramstyle="qmark")
    columns = driver.columns("db", "videos")
    assert columns[0] == Column(
        name="id",
        full_db_type="int(11)",
        db_type="int",
        default="auto_increment",
        unique=True,
    )
    assert columns[1].nullable is True
    assert columns[1].default == ""
    assert columns[1].comment == "the name"
    assert columns[2].auto_generated is True
    assert columns[2].default == "AUTO_GENERATED"
    query, args = conn.executed[0]
    assert args == ("videos", "videos", "db", "db", "db", "db", "videos", "videos", "db")
    assert query.endswith(" order by c.ordinal_position;")


def test_columns_whitelist_for_table():
    conn = FakeConnection([])
    driver = MySQLDriver(conn, paramstyle="qmark")
    driver.columns("db", "videos", ["videos.id", "*.name", "users.email", "videos"])
    query, args = conn.executed[0]
    assert " and c.column_name in (?,?)" in query
    assert args[-2:] == ("id", "name")
    assert len(args) == 11


def test_columns_blacklist_for_table():
    conn = FakeConnection([])
    driver = MySQLDriver(conn, paramstyle="qmark")
    driver.columns("db", "videos", [], ["videos.secret_col"])
    query, args = conn.executed[0]
    assert " and c.column_name not in (?)" in query
    assert args[-1] == "secret_col"


def test_columns_format_escapes_percent():
    conn = FakeConnection([])
    driver = MySQLDriver(conn, paramstyle="format")
    driver.columns("db", "videos")
    query, _args = conn.executed[0]
    assert "'%%MariaDB%%'" in query
    assert "?" not in query


def test_view_columns_same_as_columns():
    driver = MySQLDriver(FakeConnection(_column_rows(), _column_rows()), paramstyle="qmark")
    assert driver.view_columns("db", "videos") == driver.columns("db", "videos")


def test_primary_key_missing():
    conn = FakeConnection([])
    driver = MySQLDriver(conn, paramstyle="qmark")
    assert driver.primary_key_info("db", "videos") is None
    assert len(conn.executed) == 1


def test_primary_key_found():
    conn = FakeConnection([("PRIMARY",)], [("a",), ("b",)])
    driver = MySQLDriver(conn, paramstyle="qmark")
    pkey = driver.primary_key_info("db", "videos")
    assert pkey == PrimaryKey(name="PRIMARY", columns=["a", "b"])
    assert conn.executed[0][1] == ("videos", "db")
    assert conn.executed[1][1] == ("videos", "PRIMARY", "db")


def test_foreign_keys():
    conn = FakeConnection(
        [("videos_user_id_fk", "videos", "user_id", "users", "id")]
    )
    driver = MySQLDriver(conn, paramstyle="qmark")
    fkeys = driver.foreign_key_info("db", "videos")
    assert fkeys == [
        ForeignKey(
            table="videos",
            name="videos_user_id_fk",
            column="user_id",
            foreign_table="users",
            foreign_column="id",
        )
    ]
    assert conn.executed[0][1] == ("db", "db", "videos")