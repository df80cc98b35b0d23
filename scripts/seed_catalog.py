#!/usr/bin/env python3
"""
Seed a local database with a published course, a text lesson, a quiz lesson
and a learner profile, so the API can be exercised end to end.

Run: python scripts/seed_catalog.py
     python scripts/seed_catalog.py --user-id 00000000-0000-0000-0000-000000000001 --email me@example.com
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from uuid import uuid4

_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sqlalchemy.orm import Session  # noqa: E402

from learnpath.models.models import Assessment, Course, Lesson, Profile  # noqa: E402

QUIZ = [
    ("What does CIA stand for in security?",
     ["Confidentiality, Integrity, Availability", "Control, Inspection, Analysis", "Compliance, Identity, Access"],
     "Confidentiality, Integrity, Availability",
     "The CIA triad names the three properties security controls protect.",
     "easy"),
    ("Which of these is a phishing indicator?",
     ["A mismatched sender domain", "A valid TLS certificate", "A short subject line"],
     "A mismatched sender domain",
     "Attackers often spoof display names while sending from unrelated domains.",
     "medium"),
]


def seed_catalog(db: Session, *, user_id: str, email: str) -> str:
    """Insert the sample rows. Returns the course id."""
    if db.query(Profile).filter(Profile.id == user_id).first() is None:
        db.add(Profile(id=user_id, email=email, full_name=email.split("@", 1)[0]))

    course_id = str(uuid4())
    db.add(
        Course(
            id=course_id,
            title="Intro to Security",
            description="Core ideas: the CIA triad, common threats and basic defenses.",
            difficulty_level="beginner",
            estimated_hours=2,
            is_published=True,
        )
    )
    db.add(
        Lesson(
            id=str(uuid4()),
            course_id=course_id,
            title="The CIA Triad",
            content="Confidentiality, Integrity, Availability: the pillars of security.",
            order_index=1,
            content_type="text",
        )
    )
    quiz_id = str(uuid4())
    db.add(Lesson(id=quiz_id, course_id=course_id, title="Check your understanding", order_index=2, content_type="quiz"))
    for question, options, answer, explanation, difficulty in QUIZ:
        db.add(
            Assessment(
                id=str(uuid4()),
                lesson_id=quiz_id,
                question=question,
                options=options,
                correct_answer=answer,
                explanation=explanation,
                difficulty=difficulty,
            )
        )
    db.commit()
    return course_id


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a sample course and learner profile")
    parser.add_argument("--user-id", default="00000000-0000-0000-0000-000000000001")
    parser.add_argument("--email", default="learner@example.com")
    args = parser.parse_args()

    from learnpath.config import SessionLocal, create_db

    create_db()
    with SessionLocal() as db:
        course_id = seed_catalog(db, user_id=args.user_id, email=args.email)
    print(f"Seeded course {course_id} for {args.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
