from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional
from werkzeug.security import check_password_hash, generate_password_hash

from config import SESSION_COOKIE_NAME, SESSION_EXPIRE_MINUTES
from database import get_db, User
from errors import AuthError, ConflictError, NotFoundError, ValidationError
from logger import get_logger
from repositories import UserRepository
from schemas import AuthResult, Me, Success, UserCreate, UserLogin
from sessions import SessionStore

logger = get_logger(__name__)

auth_router = APIRouter()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4


class AuthService:
    """Registers and authenticates users and manages their sessions."""

    def __init__(self, users: UserRepository, sessions: SessionStore):
        self.users = users
        self.sessions = sessions

    def register(self, username, password, name) -> tuple[User, str]:
        username = (username or "").strip()
        name = (name or "").strip()
        password = password or ""
        if not username or not password or not name:
            raise ValidationError("Username, password and name are required")
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if self.users.get_by_username(username):
            raise ConflictError("Username already exists")

        # The unique constraint still guards against a concurrent registration
        user = self.users.add(
            User(
                username=username,
                password_hash=generate_password_hash(password),
                name=name,
            )
        )
        logger.info(f"Registered user #{user.id} ({username})")
        return user, self.sessions.create(user.id)

    def login(self, username, password) -> tuple[User, str]:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self.users.get_by_username(username)
        if user is None:
            raise NotFoundError("Username does not exist", status_code=400)
        if not check_password_hash(user.password_hash, password):
            logger.warning(f"Failed login for user #{user.id}")
            raise AuthError("Wrong password")

        logger.info(f"User #{user.id} logged in")
        return user, self.sessions.create(user.id)

    def logout(self, token: Optional[str]) -> None:
        self.sessions.expire(token)

    def current_user(self, token: Optional[str]) -> Optional[User]:
        user_id = self.sessions.read(token)
        if user_id is None:
            return None
        return self.users.get_by_id(user_id)

    def who_am_i(self, token: Optional[str]) -> Optional[str]:
        user = self.current_user(token)
        return user.name if user else None


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_auth_service(
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> AuthService:
    return AuthService(UserRepository(db), sessions)


def get_token(
    request: Request, bearer: Optional[str] = Depends(oauth2_scheme)
) -> Optional[str]:
    # An explicit Authorization header wins over the cookie
    return bearer or request.cookies.get(SESSION_COOKIE_NAME)


def get_current_user(
    token: Optional[str] = Depends(get_token),
    service: AuthService = Depends(get_auth_service),
) -> User:
    user = service.current_user(token)
    if user is None:
        raise AuthError("Not logged in", status_code=401)
    return user


def _start_session(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )


@auth_router.post("/register", response_model=AuthResult)
def register(
    user: UserCreate,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    new_user, token = service.register(user.username, user.password, user.name)
    _start_session(response, token)
    return AuthResult(name=new_user.name, token=token)


@auth_router.post("/login", response_model=AuthResult)
def login(
    user: UserLogin,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    db_user, token = service.login(user.username, user.password)
    _start_session(response, token)
    return AuthResult(name=db_user.name, token=token)


@auth_router.post("/logout", response_model=Success)
def logout(
    response: Response,
    token: Optional[str] = Depends(get_token),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return Success()


@auth_router.get("/me", response_model=Me, response_model_exclude_none=True)
def me(
    token: Optional[str] = Depends(get_token),
    service: AuthService = Depends(get_auth_service),
):
    name = service.who_am_i(token)
    if name is None:
        return Me(loggedIn=False)
    return Me(loggedIn=True, name=name)
