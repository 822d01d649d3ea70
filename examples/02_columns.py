"""
Example 02: Columns

This example demonstrates how field tags shape the column set and the SQL
fragments handed to a query builder.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field

from row_model import Model, declare


@dataclass
class Timestamps:
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Article:
    """Dataclass with tags in field metadata"""
    id: int = 0
    title: str = field(default="", metadata={"db": "headline"})
    draft_notes: str = field(default="", metadata={"db": "-"})
    comments: list = field(default_factory=list, metadata={"has_many": "comments"})
    stamps: Timestamps = field(default_factory=Timestamps, metadata={"embed": True})


class ApiKey(BaseModel):
    """Pydantic model with a caller-generated UUID key"""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, json_schema_extra={"no_auto_increment": "true"})
    label: str = ""


class Customer:
    """Plain class declared explicitly"""

    def __init__(self, id=0, name="", password_hash=""):
        self.id = id
        self.name = name
        self.password_hash = password_hash


def main():
    declare(Customer).column("name", "display_name").write_only("password_hash").register()

    print("=== Columns ===\n")

    print("1. Dataclass tags:")
    cols = Model(Article()).columns()
    print(f"   all:       {cols.string()}")
    print(f"   INSERT:    ({cols.writeable().string()}) VALUES ({cols.writeable().symbolized_string()})")
    print(f"   UPDATE:    SET {cols.writeable().update_string()}")
    print(f"   SELECT:    {cols.readable().select_string()}\n")

    print("2. Caller-supplied UUID key:")
    key = Model(ApiKey())
    print(f"   auto increment: {key.using_auto_increment()}")
    print(f"   key type:       {key.primary_key_type()}")
    print(f"   id param:       {key.id()!r}")
    print(f"   INSERT columns: {key.columns().writeable().string()}\n")

    print("3. Explicit declaration with alias:")
    cols = Model(Customer(), as_name="c").columns()
    print(f"   SELECT: {cols.readable().select_string()}")
    print(f"   UPDATE: {cols.writeable().update_string()}")


if __name__ == "__main__":
    main()
