"""Unit tests for the migration and seed scripts (loaded from their files)."""
import importlib.util
import sqlite3
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def load_script(relative: str):
    path = PROJECT_ROOT / relative
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.unit
class TestAddProgressIndexes:
    def test_collapses_duplicates_and_adds_unique_index(self, tmp_path):
        db_path = str(tmp_path / "legacy.db")
        conn = sqlite3.connect(db_path)
        conn.execute(
            "CREATE TABLE user_progress (id TEXT PRIMARY KEY, user_id TEXT, lesson_id TEXT, "
            "course_id TEXT, last_accessed_at TEXT)"
        )
        conn.executemany(
            "INSERT INTO user_progress VALUES (?, ?, ?, ?, ?)",
            [
                ("a", "u1", "l1", "c1", "2025-01-01 10:00:00"),
                ("b", "u1", "l1", "c1", "2025-01-02 10:00:00"),
                ("c", "u1", "l2", "c1", "2025-01-01 10:00:00"),
            ],
        )
        conn.commit()
        conn.close()

        load_script("migrations/add_progress_indexes.py").run_migration(db_path)

        conn = sqlite3.connect(db_path)
        try:
            ids = sorted(row[0] for row in conn.execute("SELECT id FROM user_progress"))
            assert ids == ["b", "c"]
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("INSERT INTO user_progress VALUES ('d', 'u1', 'l1', 'c1', '2025-01-03')")
        finally:
            conn.close()

    def test_missing_tables_skipped(self, tmp_path):
        db_path = str(tmp_path / "empty.db")
        load_script("migrations/add_progress_indexes.py").run_migration(db_path)
        conn = sqlite3.connect(db_path)
        try:
            assert conn.execute("SELECT count(*) FROM sqlite_master WHERE type='index'").fetchone()[0] == 0
        finally:
            conn.close()


@pytest.mark.unit
class TestSeedCatalog:
    @pytest.mark.asyncio
    async def test_seeded_course_is_browsable(self, db_session, store, learner):
        seed = load_script("scripts/seed_catalog.py")
        course_id = seed.seed_catalog(db_session, user_id=learner.user_id, email=learner.email)

        courses = await store.fetch_courses()
        assert [c.id for c in courses] == [course_id]
        lessons = await store.fetch_lessons(course_id)
        assert [l.content_type.value for l in lessons] == ["text", "quiz"]
        assessments = await store.fetch_assessments(lessons[1].id)
        assert len(assessments) == 2
        assert (await store.fetch_profile(learner.user_id)).email == learner.email
