from typing import List
from fastapi import APIRouter, HTTPException, Depends
from lunchledger.schemas.user import UserLogin, UserResponse
from lunchledger.models.user import User
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.db.mongo import get_db

router = APIRouter()


def to_response(user: User) -> UserResponse:
    return UserResponse(id=str(user.id), name=user.name, avatar=user.avatar)


@router.post("/login", response_model=UserResponse)
async def login(user_in: UserLogin, db = Depends(get_db)):
    """Find a user by case-insensitive name, creating it on first login"""
    user = await UserRepository(db).find_or_create_by_name(user_in.name, user_in.avatar)
    return to_response(user)

@router.get("/", response_model=List[UserResponse])
async def list_users(db = Depends(get_db)):
    users = await UserRepository(db).list_users()
    return [to_response(u) for u in users]

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db = Depends(get_db)):
    user = await UserRepository(db).get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return to_response(user)
