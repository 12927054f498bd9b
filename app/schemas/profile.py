from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class Session(BaseModel):
    user_id: str
    access_token: str


# --- Profiles (user_profiles) ---
class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @property
    def avatar_fallback(self) -> str:
        # Two initials from the display name, e.g. "Alice A" -> "AL"
        return (self.full_name or self.username or "")[:2].upper()


# --- Resources ---
class Resource(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    author_id: str
    is_approved: bool = False
    created_at: Optional[datetime] = None
    title: Optional[str] = None
    description: Optional[str] = None
    resource_type: Optional[str] = None
    subject: Optional[str] = None
    url: Optional[str] = None


# --- Study groups ---
class StudyGroup(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    created_by: str
    is_private: bool = False
    created_at: Optional[datetime] = None
    name: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    max_members: Optional[int] = None
