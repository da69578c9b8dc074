import pytest

from schemaboil.importers import (
    Collection,
    ImportSet,
    add_type_imports,
    combine_string_slices,
    map_from_interface,
    merge,
    merge_set,
    new_default_imports,
    nullable_enum_imports,
    set_from_interface,
    sort_imports,
)

RAW_SET = {
    "standard": ["hello", "there"],
    "third_party": ["there", "hello"],
}


def test_set_from_interface():
    result = set_from_interface(RAW_SET)
    assert result.standard == ["hello", "there"]
    assert result.third_party == ["there", "hello"]


def test_set_from_interface_rejects_non_mapping():
    with pytest.raises(TypeError):
        set_from_interface(["hello"])


def test_set_from_interface_rejects_non_list():
    with pytest.raises(TypeError):
        set_from_interface({"standard": "hello"})


def test_set_from_interface_rejects_non_string_element():
    with pytest.raises(TypeError, match="element 1"):
        set_from_interface({"third_party": ["ok", 5]})


def test_map_from_interface():
    mapping = map_from_interface({"test_main": RAW_SET})
    assert mapping["test_main"].standard == ["hello", "there"]
    assert mapping["test_main"].third_party == ["there", "hello"]


def test_map_from_interface_alt_syntax():
    mapping = map_from_interface([{"name": "test_main", **RAW_SET}])
    assert list(mapping) == ["test_main"]
    assert mapping["test_main"].standard == ["hello", "there"]
    assert mapping["test_main"].third_party == ["there", "hello"]


def test_map_from_interface_rejects_other_types():
    with pytest.raises(TypeError):
        map_from_interface("nope")


def test_imports_sort():
    assert sort_imports(['"fmt"', '"errors"']) == ['"errors"', '"fmt"']
    assert sort_imports(
        [
            '_ "github.com/lib/pq"',
            '_ "github.com/gorilla/n"',
            '"github.com/gorilla/mux"',
            '"github.com/gorilla/websocket"',
        ]
    ) == [
        '"github.com/gorilla/mux"',
        '_ "github.com/gorilla/n"',
        '"github.com/gorilla/websocket"',
        '_ "github.com/lib/pq"',
    ]


def test_add_type_imports():
    expected = ImportSet(
        standard=['"errors"', '"fmt"', '"time"'],
        third_party=[
            '"github.com/volatiletech/null/v8"',
            '"github.com/volatiletech/sqlboiler/v4/boil"',
        ],
    )
    types = ["null.Time", "null.Time", "time.Time"]
    type_map = {
        "null.Time": ImportSet(third_party=['"github.com/volatiletech/null/v8"']),
        "time.Time": ImportSet(standard=['"time"']),
    }

    base1 = ImportSet(
        standard=['"errors"', '"fmt"'],
        third_party=['"github.com/volatiletech/sqlboiler/v4/boil"'],
    )
    assert add_type_imports(base1, type_map, types) == expected
    assert base1.standard == ['"errors"', '"fmt"']

    base2 = ImportSet(
        standard=['"errors"', '"fmt"', '"time"'],
        third_party=[
            '"github.com/volatiletech/null/v8"',
            '"github.com/volatiletech/sqlboiler/v4/boil"',
        ],
    )
    assert add_type_imports(base2, type_map, types) == expected


def test_merge_set():
    a = ImportSet(
        standard=["fmt"],
        third_party=["github.com/volatiletech/sqlboiler/v4", "github.com/volatiletech/null/v8"],
    )
    b = ImportSet(standard=["os"], third_party=["github.com/volatiletech/sqlboiler/v4"])
    c = merge_set(a, b)
    assert c.standard == ["fmt", "os"]
    assert c.third_party == [
        "github.com/volatiletech/null/v8",
        "github.com/volatiletech/sqlboiler/v4",
    ]


def test_combine_string_slices():
    assert combine_string_slices(None, None) == []
    assert combine_string_slices(["1", "2"], None) == ["1", "2"]
    assert combine_string_slices(None, ["1", "2"]) == ["1", "2"]
    assert combine_string_slices(["1", "2"], ["3", "4"]) == ["1", "2", "3", "4"]


def _pair(value):
    return ImportSet(standard=[value], third_party=[value])


def test_merge():
    a = Collection(
        all=_pair("aa"),
        test=_pair("at"),
        singleton={"a": _pair("as"), "c": _pair("as")},
        test_singleton={"a": _pair("at"), "c": _pair("at")},
        based_on_type={"a": _pair("abot"), "c": _pair("abot")},
    )
    b = Collection(
        all=_pair("bb"),
        test=_pair("bt"),
        singleton={"b": _pair("bs"), "c": _pair("bs")},
        test_singleton={"b": _pair("bt"), "c": _pair("bt")},
        based_on_type={"b": _pair("bbot"), "c": _pair("bbot")},
    )
    c = merge(a, b)

    def has(s, first, second):
        assert s.standard == [first, second]
        assert s.third_party == [first, second]

    has(c.all, "aa", "bb")
    has(c.test, "at", "bt")
    has(c.singleton["c"], "as", "bs")
    has(c.test_singleton["c"], "at", "bt")
    has(c.based_on_type["c"], "abot", "bbot")
    assert set(c.singleton) == {"a", "b", "c"}
    assert c.singleton["a"] == _pair("as")


def test_set_format():
    s = ImportSet(standard=['"fmt"'], third_party=['"github.com/friendsofgo/errors"'])
    expected = 'import (\n\t"fmt"\n\n\t"github.com/friendsofgo/errors"\n)'
    assert s.format().strip() == expected


def test_set_format_single_and_empty():
    assert ImportSet().format() == ""
    assert ImportSet(third_party=['"x"']).format() == 'import "x"'
    assert ImportSet(standard=['"a"', '"b"']).format() == 'import (\n\t"a"\n\t"b"\n)\n'


def test_default_imports():
    col = new_default_imports()
    assert col.all.standard[0] == '"database/sql"'
    assert set(col.singleton) == {"boil_queries", "boil_types"}
    assert set(col.test_singleton) == {
        "boil_main_test",
        "boil_queries_test",
        "boil_suites_test",
    }
    assert col.based_on_type == {}


def test_nullable_enum_imports():
    col = nullable_enum_imports()
    assert col.singleton["boil_types"].standard == [
        '"bytes"',
        '"database/sql/driver"',
        '"encoding/json"',
    ]
    assert col.all == ImportSet()