from fastapi import APIRouter, Depends, HTTPException

from emojilens.api.deps import get_storage
from emojilens.schemas.user import User
from emojilens.services.storage import MemStorage

router = APIRouter(tags=["users"])


@router.get("/user/{user_id}", response_model=User)
def get_user(user_id: str, store: MemStorage = Depends(get_storage)) -> User:
    user = store.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
