"""Import collections used when generating source files from templates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ImportSet:
    """Standard-library and third-party imports of one generated file."""

    standard: list[str] = field(default_factory=list)
    third_party: list[str] = field(default_factory=list)

    def format(self) -> str:
        """Render the set as an import declaration."""
        total = len(self.standard) + len(self.third_party)
        if total == 0:
            return ""
        if total == 1:
            only = self.standard[0] if self.standard else self.third_party[0]
            return f"import {only}"

        parts = ["import ("]
        parts.extend(f"\n\t{imp}" for imp in self.standard)
        if self.standard and self.third_party:
            parts.append("\n")
        parts.extend(f"\n\t{imp}" for imp in self.third_party)
        parts.append("\n)\n")
        return "".join(parts)


@dataclass
class Collection:
    """Imports for every kind of generated file."""

    all: ImportSet = field(default_factory=ImportSet)
    test: ImportSet = field(default_factory=ImportSet)
    singleton: dict[str, ImportSet] = field(default_factory=dict)
    test_singleton: dict[str, ImportSet] = field(default_factory=dict)
    based_on_type: dict[str, ImportSet] = field(default_factory=dict)


def _string_list(value: Any, key: str, label: str) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"import set {key} must be a list")
    result = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise TypeError(
                f"import set {label} slice element {index} ({item!r}) must be string"
            )
        result.append(item)
    return result


def set_from_interface(value: Any) -> ImportSet:
    """Build an ImportSet from a loosely typed configuration mapping."""
    if not isinstance(value, Mapping):
        raise TypeError("import set should be a mapping")
    result = ImportSet()
    if "standard" in value:
        result.standard = _string_list(value["standard"], "standard", "standard")
    if "third_party" in value:
        result.third_party = _string_list(
            value["third_party"], "third_party", "third party"
        )
    return result


def map_from_interface(value: Any) -> dict[str, ImportSet]:
    """Build a name -> ImportSet mapping from a mapping or a list of named mappings."""
    if isinstance(value, list):
        entries = []
        for item in value:
            if not isinstance(item, Mapping) or not isinstance(item.get("name"), str):
                raise TypeError("import map list entries need a string 'name'")
            entries.append((item["name"], item))
    elif isinstance(value, Mapping):
        entries = list(value.items())
    else:
        raise TypeError("import map should be a mapping or a list of mappings")
    return {name: set_from_interface(entry) for name, entry in entries}


def _sort_key(imp: str) -> str:
    return imp.lstrip("_ ")


def sort_imports(imports: Iterable[str]) -> list[str]:
    """Sort imports, ignoring leading blank-identifier markers."""
    return sorted(imports, key=_sort_key)


def _remove_duplicates(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def combine_string_slices(a: Iterable[str] | None, b: Iterable[str] | None) -> list[str]:
    """Concatenate two optional string sequences into a new list."""
    return [*(a or ()), *(b or ())]


def merge_set(a: ImportSet, b: ImportSet) -> ImportSet:
    """Merge two sets, removing duplicates and sorting each part."""
    return ImportSet(
        standard=sort_imports(
            _remove_duplicates(combine_string_slices(a.standard, b.standard))
        ),
        third_party=sort_imports(
            _remove_duplicates(combine_string_slices(a.third_party, b.third_party))
        ),
    )


def _merge_map(
    a: Mapping[str, ImportSet], b: Mapping[str, ImportSet]
) -> dict[str, ImportSet]:
    merged = dict(a)
    for key, to_merge in b.items():
        merged[key] = merge_set(merged.get(key, ImportSet()), to_merge)
    return merged


def merge(a: Collection, b: Collection) -> Collection:
    """Create a new collection holding the de-duplicated contents of both."""
    return Collection(
        all=merge_set(a.all, b.all),
        test=merge_set(a.test, b.test),
        singleton=_merge_map(a.singleton, b.singleton),
        test_singleton=_merge_map(a.test_singleton, b.test_singleton),
        based_on_type=_merge_map(a.based_on_type, b.based_on_type),
    )


def add_type_imports(
    base: ImportSet, type_map: Mapping[str, ImportSet], column_types: Iterable[str]
) -> ImportSet:
    """Return ``base`` extended with the imports needed by the given column types."""
    standard = list(base.standard)
    third_party = list(base.third_party)
    for typ in column_types:
        extra = type_map.get(typ)
        if extra is not None:
            standard.extend(extra.standard)
            third_party.extend(extra.third_party)
    return ImportSet(
        standard=sort_imports(_remove_duplicates(standard)),
        third_party=sort_imports(_remove_duplicates(third_party)),
    )


def new_default_imports() -> Collection:
    """Return the default import collection."""
    return Collection(
        all=ImportSet(
            standard=[
                '"database/sql"',
                '"fmt"',
                '"reflect"',
                '"strings"',
                '"sync"',
                '"time"',
            ],
            third_party=[
                '"github.com/friendsofgo/errors"',
                '"github.com/volatiletech/sqlboiler/v4/boil"',
                '"github.com/volatiletech/sqlboiler/v4/queries"',
                '"github.com/volatiletech/sqlboiler/v4/queries/qm"',
                '"github.com/volatiletech/sqlboiler/v4/queries/qmhelper"',
                '"github.com/volatiletech/strmangle"',
            ],
        ),
        singleton={
            "boil_queries": ImportSet(
                third_party=[
                    '"github.com/volatiletech/sqlboiler/v4/drivers"',
                    '"github.com/volatiletech/sqlboiler/v4/queries"',
                    '"github.com/volatiletech/sqlboiler/v4/queries/qm"',
                ],
            ),
            "boil_types": ImportSet(
                standard=['"strconv"'],
                third_party=[
                    '"github.com/friendsofgo/errors"',
                    '"github.com/volatiletech/sqlboiler/v4/boil"',
                    '"github.com/volatiletech/strmangle"',
                ],
            ),
        },
        test=ImportSet(
            standard=['"bytes"', '"reflect"', '"testing"'],
            third_party=[
                '"github.com/volatiletech/sqlboiler/v4/boil"',
                '"github.com/volatiletech/sqlboiler/v4/queries"',
                '"github.com/volatiletech/randomize"',
                '"github.com/volatiletech/strmangle"',
            ],
        ),
        test_singleton={
            "boil_main_test": ImportSet(
                standard=[
                    '"database/sql"',
                    '"flag"',
                    '"fmt"',
                    '"math/rand"',
                    '"os"',
                    '"path/filepath"',
                    '"strings"',
                    '"testing"',
                    '"time"',
                ],
                third_party=[
                    '"github.com/spf13/viper"',
                    '"github.com/volatiletech/sqlboiler/v4/boil"',
                ],
            ),
            "boil_queries_test": ImportSet(
                standard=[
                    '"bytes"',
                    '"fmt"',
                    '"io"',
                    '"io/ioutil"',
                    '"math/rand"',
                    '"regexp"',
                ],
                third_party=['"github.com/volatiletech/sqlboiler/v4/boil"'],
            ),
            "boil_suites_test": ImportSet(standard=['"testing"']),
        },
    )


def nullable_enum_imports() -> Collection:
    """Return the extra imports needed by nullable enum types."""
    return Collection(
        singleton={
            "boil_types": ImportSet(
                standard=['"bytes"', '"database/sql/driver"', '"encoding/json"'],
                third_party=[
                    '"github.com/volatiletech/null/v8"',
                    '"github.com/volatiletech/null/v8/convert"',
                ],
            ),
        },
    )