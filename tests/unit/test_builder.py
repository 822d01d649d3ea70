"""Unit tests for record metadata introspection and declarations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, ClassVar, Optional

import pytest
from pydantic import BaseModel, Field
from structlog.testing import capture_logs

from row_model.core.exceptions import DeclarationError
from row_model.core.settings import reset_settings
from row_model.mapping.builder import declare, introspect, is_record_type, unwrap_type
from row_model.mapping.plan import Tags
from row_model.mapping.registry import default_registry


@dataclass
class Audit:
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Invoice:
    id: uuid.UUID = field(default_factory=uuid.uuid4, metadata={"no_auto_increment": True})
    number: str = field(default="", metadata={"db": "invoice_no"})
    notes: str = field(default="", metadata={"db": "-"})
    audit: Audit = field(default_factory=Audit, metadata={"embed": "true"})
    lines: list = field(default_factory=list, metadata={"has_many": "invoice_lines"})
    kind: ClassVar[str] = "invoice"


@dataclass
class Base:
    id: int = 0


@dataclass
class Child(Base):
    label: str = ""


class Customer(BaseModel):
    id: int = 0
    email: str = Field(default="", json_schema_extra={"db": "email_address"})
    phone: Optional[str] = None


class Legacy:
    def __init__(self, id, name="") -> None:
        self.id = id
        self.name = name


@dataclass
class Profile:
    id: int = 0
    name: Optional[Annotated[str, Tags(db="full_name")]] = None
    bio: Annotated[str, Tags(rw="r")] | None = None


class Member(BaseModel):
    id: int = 0
    nickname: Optional[Annotated[str, Tags(db="handle")]] = None


class TestIsRecordType:
    @pytest.mark.parametrize("tp", [Invoice, Customer, Legacy, Child])
    def test_records(self, tp: type) -> None:
        assert is_record_type(tp) is True

    @pytest.mark.parametrize("tp", [str, int, bool, float, datetime, uuid.UUID, dict, list])
    def test_non_records(self, tp: type) -> None:
        assert is_record_type(tp) is False

    def test_non_types(self) -> None:
        assert is_record_type("users") is False
        assert is_record_type(None) is False


class TestUnwrapType:
    def test_optional(self) -> None:
        assert unwrap_type(Optional[int]) is int
        assert unwrap_type(int | None) is int

    def test_plain(self) -> None:
        assert unwrap_type(str) is str


class TestIntrospect:
    def test_dataclass_fields_and_tags(self) -> None:
        plan = introspect(Invoice)
        attrs = [f.attribute for f in plan.fields]
        assert attrs == ["id", "number", "notes", "created_at", "updated_at", "lines"]
        assert plan.field("number").column == "invoice_no"
        assert plan.field("notes").skip is True
        assert plan.field("lines").association == "has_many"
        assert plan.field("id").no_auto_increment == "true"
        assert plan.field("id").annotation is uuid.UUID

    def test_embedded_fields_keep_their_path(self) -> None:
        plan = introspect(Invoice)
        assert plan.field("created_at").path == ("audit", "created_at")

    def test_column_fields(self) -> None:
        plan = introspect(Invoice)
        assert [f.column for f in plan.column_fields()] == [
            "id",
            "invoice_no",
            "created_at",
            "updated_at",
        ]

    def test_inherited_fields(self) -> None:
        plan = introspect(Child)
        assert [f.attribute for f in plan.fields] == ["id", "label"]

    def test_pydantic_fields(self) -> None:
        plan = introspect(Customer)
        assert plan.field("email").column == "email_address"
        assert plan.field("phone").annotation is str

    def test_plain_class_uses_init_signature(self) -> None:
        plan = introspect(Legacy)
        assert [f.attribute for f in plan.fields] == ["id", "name"]

    def test_missing_field(self) -> None:
        assert introspect(Legacy).field("created_at") is None

    def test_id_attribute_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROW_MODEL_ID_ATTRIBUTE", "pk")
        reset_settings()
        assert introspect(Base).id_attribute == "pk"


class TestNestedTags:
    def test_tags_inside_optional(self) -> None:
        plan = introspect(Profile)
        assert [f.column for f in plan.column_fields()] == ["id", "full_name", "bio"]
        assert plan.field("name").annotation is str
        assert plan.field("bio").rw == "r"

    def test_tags_inside_optional_on_pydantic_model(self) -> None:
        plan = introspect(Member)
        assert [f.column for f in plan.column_fields()] == ["id", "handle"]
        assert plan.field("nickname").annotation is str


class TestLocalTypes:
    def test_embedded_local_record(self) -> None:
        @dataclass
        class LocalAudit:
            created_at: datetime | None = None
            updated_at: datetime | None = None

        @dataclass
        class Draft:
            id: int = 0
            title: str = field(default="", metadata={"db": "headline"})
            audit: LocalAudit = field(default_factory=LocalAudit, metadata={"embed": True})

        plan = introspect(Draft)
        assert [f.column for f in plan.column_fields()] == [
            "id",
            "headline",
            "created_at",
            "updated_at",
        ]
        assert plan.field("id").annotation is int
        assert plan.field("created_at").path == ("audit", "created_at")

    def test_unknown_type_keeps_the_other_fields(self) -> None:
        class Helper:
            pass

        @dataclass
        class Job:
            id: int = 0
            helper: Helper | None = None
            name: Optional[Annotated[str, Tags(db="job_name")]] = None
            run_at: int | None = None

        with capture_logs() as logs:
            plan = introspect(Job)

        assert [f.column for f in plan.column_fields()] == ["id", "helper", "job_name", "run_at"]
        assert plan.field("id").annotation is int
        assert plan.field("name").annotation is str
        assert plan.field("run_at").annotation is int
        unresolved = [e for e in logs if e["event"] == "type_hint_partially_resolved"]
        assert [e["field"] for e in unresolved] == ["helper"]
        assert unresolved[0]["log_level"] == "warning"

    def test_local_plain_class(self) -> None:
        class Marker:
            pass

        class Row:
            id: int
            marker: Marker
            label: Annotated[str, Tags(db="row_label")]

        plan = introspect(Row)
        assert [f.column for f in plan.column_fields()] == ["id", "marker", "row_label"]
        assert plan.field("id").annotation is int


class TestDeclare:
    def test_overrides_columns(self) -> None:
        plan = (
            declare(Legacy)
            .column("name", "display_name")
            .primary_key("id", auto_increment=False)
            .build()
        )
        assert plan.field("name").column == "display_name"
        assert plan.field("id").no_auto_increment == "true"
        assert plan.id_attribute == "id"

    def test_skip_read_only_write_only_select(self) -> None:
        plan = (
            declare(Child)
            .skip("label")
            .read_only("id")
            .build()
        )
        assert plan.field("label").skip is True
        assert plan.field("id").rw == "r"

        plan = declare(Child).write_only("label").select("id", "max(id)").build()
        assert plan.field("label").rw == "w"
        assert plan.field("id").select == "max(id)"

    def test_custom_primary_key(self) -> None:
        plan = declare(Child).primary_key("label").build()
        assert plan.id_attribute == "label"
        assert plan.field("label").no_auto_increment == "false"

    def test_unknown_attribute(self) -> None:
        with pytest.raises(DeclarationError, match="missing"):
            declare(Child).column("missing", "x").build()

    def test_register_installs_plan(self) -> None:
        plan = declare(Legacy).column("name", "display_name").register()
        assert default_registry.has(Legacy)
        assert default_registry.plan_for(Legacy) is plan
