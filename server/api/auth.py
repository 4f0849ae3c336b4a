# server/api/auth.py

from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from fastapi import APIRouter, HTTPException, Request, status, Depends, Body
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from api.deps import get_accounts
from core.accounts import Accounts
from core.errors import AuthenticationFailure, NotFound
from models.user import User as UserModel
from schemas.user import Token, UserOut


router = APIRouter()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def create_access_token(request: Request, session_token: str) -> str:
    settings = request.app.state.settings
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.session_ttl_minutes)
    to_encode = {"sid": session_token, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def read_session_token(request: Request, token: str) -> str:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    settings = request.app.state.settings
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise credentials_exception
    session_token = payload.get("sid")
    if session_token is None:
        raise credentials_exception
    return session_token


def _resolve(accounts: Accounts, session_token: str) -> UserModel:
    try:
        return accounts.current_user(session_token)
    except (AuthenticationFailure, NotFound):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_session_token(request: Request, token: str = Depends(oauth2_scheme)) -> str:
    return read_session_token(request, token)


def get_current_user(session_token: str = Depends(get_session_token),
                     accounts: Accounts = Depends(get_accounts)) -> UserModel:
    return _resolve(accounts, session_token)


def get_optional_user(request: Request, token: str | None = Depends(optional_oauth2_scheme),
                      accounts: Accounts = Depends(get_accounts)) -> UserModel | None:
    if token is None:
        return None
    return _resolve(accounts, read_session_token(request, token))


@router.post("/token", response_model=Token)
def login(request: Request, form_data: OAuth2PasswordRequestForm = Depends(),
          accounts: Accounts = Depends(get_accounts)):
    _, session_token = accounts.login(form_data.username, form_data.password)
    return {"access_token": create_access_token(request, session_token), "token_type": "bearer"}


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(request: Request, username: str = Body(...), password: str = Body(...),
             accounts: Accounts = Depends(get_accounts)):
    _, session_token = accounts.register(username, password)
    return {"access_token": create_access_token(request, session_token), "token_type": "bearer"}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(session_token: str = Depends(get_session_token), accounts: Accounts = Depends(get_accounts)):
    accounts.logout(session_token)


@router.get("/users/me", response_model=UserOut)
def read_users_me(current_user: UserModel = Depends(get_current_user)):
    return current_user
