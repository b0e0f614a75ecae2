from fastapi import APIRouter, Depends

from filevault.models.user import User
from filevault.schemas.user import SignInRequest, SignUpResponse, TokenResponse, UserCreate, UserRead
from filevault.core.security import create_access_token
from filevault.core.deps import get_current_user, get_user_service
from filevault.services.users import UserService

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)


@router.post("/signup", response_model=SignUpResponse)
async def signup(user_data: UserCreate, users: UserService = Depends(get_user_service)):
    user = await users.register(user_data.username, user_data.email, user_data.password)
    return SignUpResponse(message="User registered successfully!", user_id=user.id)


@router.post("/signin", response_model=TokenResponse)
async def signin(credentials: SignInRequest, users: UserService = Depends(get_user_service)):
    user = await users.authenticate(credentials.principal, credentials.password)
    access_token = create_access_token(user.id)
    return TokenResponse(token=access_token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
async def read_me(current_user: User = Depends(get_current_user)):
    return current_user
