from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from learnpath.models.enums import DifficultyLevel, LearningStyle

EDITABLE_PROFILE_FIELDS = ("full_name", "learning_style", "skill_level")


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str = ""
    learning_style: LearningStyle = LearningStyle.VISUAL
    skill_level: DifficultyLevel = DifficultyLevel.BEGINNER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdateProfileRequest(BaseModel):
    full_name: Optional[str] = None
    learning_style: Optional[LearningStyle] = None
    skill_level: Optional[DifficultyLevel] = None

    def changes(self) -> dict:
        """Only the fields the caller actually sent, as stored values."""
        return self.model_dump(exclude_unset=True, exclude_none=True, mode="json")
