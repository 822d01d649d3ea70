"""
Example 03: Inserting with sqlite3

This example plays the part of the persistence layer: it asks a Model for
the table name, columns and parameters, stamps timestamps, executes the
INSERT and writes the generated ID back onto each record. The title
attribute is stored in the "summary" column.
"""

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime

from row_model import Model, set_now_func


@dataclass
class Task:
    id: int = 0
    title: str = field(default="", metadata={"db": "summary"})
    created_at: int = 0
    updated_at: int = 0


def insert_all(conn, records):
    model = Model(records)
    cols = model.columns().writeable()
    sql = f"INSERT INTO {model.table_name()} ({cols.string()}) VALUES ({cols.symbolized_string()})"

    def insert_one(child):
        child.touch_created_at()
        child.touch_updated_at()
        params = child.params(cols)
        cursor = conn.execute(sql, params)
        child.set_id(cursor.lastrowid)

    model.iterate(insert_one)
    return sql


def main():
    set_now_func(lambda: datetime(2024, 1, 1, 12, 0, 0))

    conn = sqlite3.connect(":memory:")
    conn.execute("""
        CREATE TABLE tasks (
            id INTEGER PRIMARY KEY,
            summary TEXT NOT NULL,
            created_at INTEGER,
            updated_at INTEGER
        )
    """)

    tasks = [Task(title="write docs"), Task(title="ship release")]

    print("=== sqlite3 INSERT ===\n")
    print(f"SQL: {insert_all(conn, tasks)}\n")
    for task in tasks:
        print(f"   {task}")

    model = Model(tasks[0])
    row = conn.execute(f"SELECT * FROM tasks WHERE {model.id_field()} = ?", (model.id(),)).fetchone()
    print(f"\nRow for id={model.id()}: {row}")
    conn.close()


if __name__ == "__main__":
    main()
