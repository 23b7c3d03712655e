from pydantic import BaseModel, Field, ConfigDict


class UserLogin(BaseModel):
    """Login by name; unknown names create a new user."""
    name: str = Field(..., min_length=1, max_length=100)
    avatar: str = Field("🙂", min_length=1, max_length=16)


class UserResponse(BaseModel):
    id: str
    name: str
    avatar: str

    model_config = ConfigDict(from_attributes=True)
