from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    user_id: str
    food_item: str = Field(..., min_length=1, max_length=200)


class OrderUpdate(BaseModel):
    food_item: str = Field(..., min_length=1, max_length=200)


class OrderResponse(BaseModel):
    id: str
    date: str
    user_id: str
    user_name: str = ""
    user_avatar: str = ""
    food_item: str
    created_at: datetime


class OrderSummaryResponse(BaseModel):
    date: str
    grouped: Dict[str, int]
    copy_text: str
    download_text: str
