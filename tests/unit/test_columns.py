"""Unit tests for Columns and column set construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from row_model.columns.columns import Columns, IDField
from row_model.columns.for_type import for_type, for_type_with_alias
from row_model.mapping.plan import Tags


@dataclass
class Person:
    id: int = 0
    name: str = field(default="", metadata={"db": "full_name"})
    created_at: datetime | None = None


@dataclass
class Timestamps:
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Article:
    id: int = 0
    title: str = ""
    body: str = field(default="", metadata={"db": "-"})
    author: object = field(default=None, metadata={"belongs_to": "users"})
    comments: list = field(default_factory=list, metadata={"has_many": "comments"})
    audit: Timestamps = field(default_factory=Timestamps, metadata={"embed": True})


@dataclass
class Report:
    id: int = 0
    total: int = field(default=0, metadata={"select": "sum(r.amount) as total"})
    secret: str = field(default="", metadata={"rw": "w"})
    computed: str = field(default="", metadata={"rw": "r"})


class Song(BaseModel):
    id: int = 0
    title: str = Field(default="", json_schema_extra={"db": "song_title"})
    play_count: int = 0


class Track:
    id: int
    track_no: Annotated[int, Tags(db="number")]

    def __init__(self, id: int = 0, track_no: int = 0) -> None:
        self.id = id
        self.track_no = track_no


class Empty:
    pass


class TestColumns:
    def test_add_preserves_order(self) -> None:
        cols = Columns("users")
        cols.add("name", "email", "age")
        assert cols.names == ["name", "email", "age"]

    def test_add_is_duplicate_free(self) -> None:
        cols = Columns("users")
        cols.add("name", "name")
        cols.add("name")
        assert len(cols) == 1

    def test_add_returns_existing_column(self) -> None:
        cols = Columns("users")
        first = cols.add("name")[0]
        again = cols.add("name,r")[0]
        assert again is first
        assert again.writeable is True

    def test_rw_flags(self) -> None:
        cols = Columns("users")
        cols.add("created,r", "password,w")
        assert cols.get("created").writeable is False
        assert cols.get("password").readable is False

    def test_id_field_writeability(self) -> None:
        cols = Columns("users", id_field=IDField("id", writeable=False))
        cols.add("id", "name")
        assert cols.writeable().names == ["name"]
        assert cols.readable().names == ["id", "name"]

    def test_writeable_id_field(self) -> None:
        cols = Columns("users", id_field=IDField("id", writeable=True))
        cols.add("id", "name")
        assert cols.writeable().names == ["id", "name"]

    def test_remove(self) -> None:
        cols = Columns("users")
        cols.add("a", "b", "c")
        cols.remove("b", "missing")
        assert cols.names == ["a", "c"]
        assert "b" not in cols

    def test_string_forms(self) -> None:
        cols = Columns("users")
        cols.add("id", "name")
        assert cols.string() == "id, name"
        assert cols.symbolized_string() == ":id, :name"

    def test_update_string(self) -> None:
        cols = Columns("users")
        cols.add("name", "email")
        assert cols.writeable().update_string() == "name = :name, email = :email"

    def test_quoted_update_string(self) -> None:
        cols = Columns("users")
        cols.add("name")
        assert cols.writeable().quoted_update_string(lambda n: f'"{n}"') == '"name" = :name'

    def test_select_string_uses_table_name(self) -> None:
        cols = Columns("users")
        cols.add("id", "name")
        assert cols.readable().select_string() == "users.id, users.name"

    def test_select_string_uses_alias(self) -> None:
        cols = Columns("users", "u")
        cols.add("id", "name")
        assert cols.readable().select_string() == "u.id, u.name"

    def test_set_select_sql_makes_column_read_only(self) -> None:
        cols = Columns("users")
        cols.add("total")
        col = cols.set_select_sql("total", "count(*) as total")
        assert col.writeable is False
        assert cols.readable().select_string() == "count(*) as total"

    def test_copy_is_independent(self) -> None:
        cols = Columns("users")
        cols.add("a")
        clone = cols.copy()
        clone.add("b")
        assert cols.names == ["a"]
        assert clone.names == ["a", "b"]


class TestForType:
    def test_tagged_and_converted_names(self) -> None:
        cols = for_type(Person, "people")
        assert cols.names == ["id", "full_name", "created_at"]

    def test_auto_increment_id_not_writeable(self) -> None:
        cols = for_type(Person, "people", IDField("id", writeable=False))
        assert cols.writeable().names == ["full_name", "created_at"]

    def test_alias_qualifies_fragments(self) -> None:
        cols = for_type_with_alias(Person, "people", "p")
        assert cols.readable().select_string() == "p.id, p.full_name, p.created_at"

    def test_skip_association_and_embed(self) -> None:
        cols = for_type(Article, "articles")
        assert cols.names == ["id", "title", "created_at", "updated_at"]

    def test_select_and_rw_tags(self) -> None:
        cols = for_type(Report, "reports")
        assert cols.get("total").select_sql == "sum(r.amount) as total"
        assert cols.writeable().names == ["secret"]
        assert cols.readable().names == ["id", "total", "computed"]

    def test_pydantic_model(self) -> None:
        cols = for_type(Song, "songs")
        assert cols.names == ["id", "song_title", "play_count"]

    def test_plain_class_with_annotated_tags(self) -> None:
        cols = for_type(Track, "tracks")
        assert cols.names == ["id", "number"]

    def test_empty_type_yields_empty_set(self) -> None:
        cols = for_type(Empty, "empties")
        assert len(cols) == 0

    def test_cached_sets_are_copies(self) -> None:
        first = for_type(Person, "people")
        first.remove("full_name")
        second = for_type(Person, "people")
        assert "full_name" in second
