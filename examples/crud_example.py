#!/usr/bin/env python3
"""sqlrec CRUD Example.

This example demonstrates the basic usage of sqlrec:
- Entity definition (dataclass + Column tags)
- INSERT with auto-increment ID write-back
- Bulk INSERT with multi-row statements
- UPDATE / Save by primary key
- Template SQL with identifier and IN-list substitution

The generated SQL is printed through the "sqlrec" DEBUG logger.

Usage:
    uv run python examples/crud_example.py
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Annotated

from sqlrec import Column, Sqlrec, substitute

# =============================================================================
# Entity Definition
# =============================================================================


@dataclass
class User:
    """User entity.

    Use Annotated[T, Column("column,modifiers")] to define the mapping.
    "pk" marks the primary key, "omitempty" leaves zero values out of INSERT.
    """

    id: Annotated[int, Column("id,pk,omitempty")]
    name: Annotated[str, Column("name")]
    email: Annotated[str, Column("email")]
    department: Annotated[str | None, Column("department")] = None


# =============================================================================
# Database Setup
# =============================================================================


def setup_database() -> sqlite3.Connection:
    """Set up SQLite database for testing."""
    conn = sqlite3.connect(":memory:")
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            department TEXT
        )
    """)
    return conn


def show_users(conn: sqlite3.Connection) -> None:
    for row in conn.execute("SELECT id, name, email, department FROM users ORDER BY id"):
        print(f"  {row}")
    print()


# =============================================================================
# CRUD Operations
# =============================================================================


def demo_insert(db: Sqlrec, conn: sqlite3.Connection) -> None:
    """Demo: INSERT with ID write-back."""
    print("=" * 60)
    print("[INSERT] Register users one by one")
    print("=" * 60)

    users = [
        User(id=0, name="Tanaka Taro", email="tanaka@example.com", department="Sales"),
        User(id=0, name="Suzuki Hanako", email="suzuki@example.com"),
    ]
    db.insert("users", users)
    for user in users:
        print(f"  Inserted: {user}")
    print()
    show_users(conn)


def demo_insert_bulk(db: Sqlrec, conn: sqlite3.Connection) -> None:
    """Demo: Bulk INSERT.

    Rows with the same columns go into one statement. IDs are not written back.
    """
    print("=" * 60)
    print("[INSERT BULK] Register users in one statement")
    print("=" * 60)

    db.insert_bulk(
        "users",
        [
            User(id=0, name="Sato Ichiro", email="sato@example.com", department="Sales"),
            User(id=0, name="Yamada Misaki", email="yamada@example.com", department="Development"),
            User(id=0, name="Takahashi Jiro", email="takahashi@example.com"),
        ],
    )
    show_users(conn)


def demo_update_and_save(db: Sqlrec, conn: sqlite3.Connection) -> None:
    """Demo: UPDATE and Save.

    Save inserts when the primary key is zero, otherwise it updates.
    """
    print("=" * 60)
    print("[UPDATE / SAVE] Update by primary key")
    print("=" * 60)

    tanaka = User(id=1, name="Tanaka Taro", email="tanaka@example.com")
    tanaka.department = "Sales (Transferred)"
    db.update("users", tanaka)

    newcomer = User(id=0, name="New User", email="newuser@example.com")
    newcomer.department = "General Affairs"
    db.save("users", newcomer)  # INSERT
    newcomer.department = None
    db.save("users", newcomer)  # UPDATE (department = null)
    show_users(conn)


def demo_template(db: Sqlrec, conn: sqlite3.Connection) -> None:
    """Demo: Template SQL.

    "@" splices a quoted identifier, "?" binds a value and expands lists.
    """
    print("=" * 60)
    print("[TEMPLATE] Identifier and IN-list substitution")
    print("=" * 60)

    result = substitute("DELETE FROM @ WHERE id IN ?", "users", [2, 4])
    print(f"Generated SQL: {result.sql}")
    print(f"Parameters: {result.params}")
    print()

    db.execute("DELETE FROM @ WHERE id IN ?", "users", [2, 4], expected_rows=2)
    show_users(conn)


# =============================================================================
# Main
# =============================================================================


def main() -> None:
    """Run the examples."""
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    print("sqlrec CRUD Example")
    print("=" * 60)
    print()

    conn = setup_database()
    with Sqlrec(conn) as db:
        demo_insert(db, conn)
        demo_insert_bulk(db, conn)
        demo_update_and_save(db, conn)
        demo_template(db, conn)

    print("=" * 60)
    print("Example completed")
    print("=" * 60)


if __name__ == "__main__":
    main()
