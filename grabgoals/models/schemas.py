from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _Resource(BaseModel):
    # Backend payloads carry joins and counters we don't model
    model_config = ConfigDict(extra="ignore")


class User(_Resource):
    id: int
    username: str
    email: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: Optional[str] = None


class Goal(_Resource):
    id: int
    user_id: Optional[int] = None
    title: str
    duration: int = Field(validation_alias=AliasChoices("duration", "duration_minutes"))  # minutes
    status: str = "in_progress"  # in_progress / nailed it / failed out
    created_at: Optional[str] = None


class Comment(_Resource):
    id: int
    user_id: int
    post_id: int
    content: str
    username: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: Optional[str] = None


class Post(_Resource):
    post_id: int = Field(validation_alias=AliasChoices("post_id", "id"))
    user_id: int
    goal_id: int
    image_url: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    like_count: int = 0
    comments: list[Comment] = Field(default_factory=list)
    # Joined from the goal when the backend lists posts
    title: Optional[str] = None
    duration: Optional[int] = None
    username: Optional[str] = None


class Notification(_Resource):
    id: int
    user_id: Optional[int] = None
    type: Optional[str] = None
    message: str = ""
    is_read: bool = False
    created_at: Optional[str] = None


class ChartBucket(BaseModel):
    label: str
    nailed_duration: int = 0
    failed_duration: int = 0
