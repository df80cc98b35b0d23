from learnpath.config import Base
from learnpath.models.enums import (
    ContentType,
    DifficultyLevel,
    LearningStyle,
    ProgressStatus,
    QuestionDifficulty,
    sql_in,
)
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(f"learning_style IN ({sql_in(LearningStyle)})", name="ck_profiles_learning_style"),
        CheckConstraint(f"skill_level IN ({sql_in(DifficultyLevel)})", name="ck_profiles_skill_level"),
    )
    id = Column(String, primary_key=True, index=True)  # auth provider user id
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, default="", nullable=False)
    learning_style = Column(String, default=LearningStyle.VISUAL.value, nullable=False)
    skill_level = Column(String, default=DifficultyLevel.BEGINNER.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint(f"difficulty_level IN ({sql_in(DifficultyLevel)})", name="ck_courses_difficulty"),
    )
    id = Column(String, primary_key=True, index=True)  # uuid
    title = Column(String, nullable=False)
    description = Column(Text, default="", nullable=False)
    difficulty_level = Column(String, default=DifficultyLevel.BEGINNER.value, nullable=False)
    estimated_hours = Column(Integer, default=0, nullable=False)
    thumbnail_url = Column(String, default="", nullable=False)
    is_published = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    lessons = relationship("Lesson", backref="course", cascade="all, delete-orphan")


class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (
        CheckConstraint(f"content_type IN ({sql_in(ContentType)})", name="ck_lessons_content_type"),
        CheckConstraint(f"difficulty_level IN ({sql_in(DifficultyLevel)})", name="ck_lessons_difficulty"),
    )
    id = Column(String, primary_key=True, index=True)  # uuid
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, default="", nullable=False)
    order_index = Column(Integer, default=0, nullable=False)
    difficulty_level = Column(String, default=DifficultyLevel.BEGINNER.value, nullable=False)
    estimated_minutes = Column(Integer, default=15, nullable=False)
    content_type = Column(String, default=ContentType.TEXT.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    assessments = relationship("Assessment", backref="lesson", cascade="all, delete-orphan")


class UserProgress(Base):
    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_progress_user_lesson"),
        CheckConstraint(f"status IN ({sql_in(ProgressStatus)})", name="ck_user_progress_status"),
        CheckConstraint(
            "completion_percentage >= 0 AND completion_percentage <= 100",
            name="ck_user_progress_percentage",
        ),
        CheckConstraint("time_spent_minutes >= 0", name="ck_user_progress_time"),
    )
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    lesson_id = Column(String, ForeignKey("lessons.id", ondelete="CASCADE"), index=True, nullable=False)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(String, default=ProgressStatus.NOT_STARTED.value, nullable=False)
    completion_percentage = Column(Integer, default=0, nullable=False)
    time_spent_minutes = Column(Integer, default=0, nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    last_accessed_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Assessment(Base):
    __tablename__ = "assessments"
    __table_args__ = (
        CheckConstraint(f"difficulty IN ({sql_in(QuestionDifficulty)})", name="ck_assessments_difficulty"),
    )
    id = Column(String, primary_key=True, index=True)  # uuid
    lesson_id = Column(String, ForeignKey("lessons.id", ondelete="CASCADE"), index=True, nullable=False)
    question = Column(Text, nullable=False)
    options = Column(JSON, default=list, nullable=False)  # list[str]
    correct_answer = Column(String, nullable=False)
    explanation = Column(Text, default="", nullable=False)
    difficulty = Column(String, default=QuestionDifficulty.MEDIUM.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserAssessment(Base):
    """Append-only log: one row per answered question."""

    __tablename__ = "user_assessments"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    assessment_id = Column(String, ForeignKey("assessments.id", ondelete="CASCADE"), index=True, nullable=False)
    user_answer = Column(String, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    attempted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    time_taken_seconds = Column(Integer, default=0, nullable=False)


class LearningPath(Base):
    __tablename__ = "learning_paths"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_learning_paths_user_course"),)
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    recommended_order = Column(JSON, default=list, nullable=False)  # list of lesson ids
    priority_score = Column(Integer, default=0, nullable=False)
    reason = Column(Text, default="", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
