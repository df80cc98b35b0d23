"""
Migration: enforce one progress row per (user, lesson) and index foreign keys.

- user_progress: collapse duplicate (user_id, lesson_id) rows, keeping the most
  recently accessed one, then add a unique index on the pair.
- lessons, assessments, user_progress, user_assessments, learning_paths: add
  the foreign-key indexes that lookups filter on.
"""

import os
import sqlite3
from typing import Optional

FK_INDEXES = [
    ("idx_lessons_course_id", "lessons", "course_id"),
    ("idx_assessments_lesson_id", "assessments", "lesson_id"),
    ("idx_user_progress_course_id", "user_progress", "course_id"),
    ("idx_user_assessments_user_id", "user_assessments", "user_id"),
    ("idx_user_assessments_assessment_id", "user_assessments", "assessment_id"),
    ("idx_learning_paths_course_id", "learning_paths", "course_id"),
]


def _table_exists(cursor: sqlite3.Cursor, name: str) -> bool:
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name=?", (name,))
    return cursor.fetchone() is not None


def run_migration(db_path: Optional[str] = None) -> None:
    db_path = db_path or os.getenv("DATABASE_URL", "sqlite:///./learnpath.db").replace("sqlite:///", "")
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        if _table_exists(cursor, "user_progress"):
            cursor.execute(
                """DELETE FROM user_progress
                   WHERE id NOT IN (
                     SELECT id FROM (
                       SELECT id, ROW_NUMBER() OVER (
                         PARTITION BY user_id, lesson_id
                         ORDER BY last_accessed_at DESC, id DESC
                       ) AS rn
                       FROM user_progress
                     ) WHERE rn = 1
                   )"""
            )
            if cursor.rowcount:
                print(f"user_progress: removed {cursor.rowcount} duplicate rows")
            cursor.execute(
                "CREATE UNIQUE INDEX IF NOT EXISTS uq_user_progress_user_lesson "
                "ON user_progress(user_id, lesson_id)"
            )
            print("user_progress: unique (user_id, lesson_id) in place")
        else:
            print("user_progress table not found. Skipping unique index.")

        for index_name, table, column in FK_INDEXES:
            if not _table_exists(cursor, table):
                print(f"{table} table not found. Skipping {index_name}.")
                continue
            cursor.execute(f"CREATE INDEX IF NOT EXISTS {index_name} ON {table}({column})")

        conn.commit()
        print("Migration add_progress_indexes completed successfully!")

    except sqlite3.Error as e:
        print(f"Error during migration: {e}")
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    run_migration()
