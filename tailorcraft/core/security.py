# tailorcraft/core/security.py
# Хеширование паролей, JWT, провайдеры идентификации и проверка ролей.
from passlib.context import CryptContext
from datetime import datetime, timedelta
from jose import jwt, JWTError
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
import logging
from sqlalchemy.orm import Session
from tailorcraft.core.config import settings
from tailorcraft.core.errors import AuthError
from tailorcraft.db.session import get_db
from tailorcraft.models.user import User, RoleEnum

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
# auto_error=False: отсутствие токена оформляем как AuthError, а не HTTPException
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_password_hash(password: str) -> str:
    """Хешируем пароль для хранения в БД."""
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяем пароль при логине."""
    return pwd_context.verify(plain_password, hashed_password)

def create_access_token(subject: str, role: RoleEnum, expires_delta: timedelta | None = None) -> str:
    """Создаём JWT токен с полями sub (id пользователя) и role."""
    to_encode = {"sub": str(subject), "role": role.value}
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


class PasswordIdentityProvider:
    """Обычный вход: email + пароль, сверка с bcrypt-хешем."""

    def authenticate(self, db: Session, email: str, password: str | None) -> User:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            raise AuthError("User not found", status_code=400)
        if not password or not user.password_hash or not verify_password(password, user.password_hash):
            raise AuthError("Invalid password", status_code=403)
        return user


class DemoIdentityProvider:
    """Демо-вход без пароля: достаточно email существующего пользователя."""

    def authenticate(self, db: Session, email: str, password: str | None) -> User:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            raise AuthError("User not found", status_code=400)
        return user


PROVIDERS = {
    "password": PasswordIdentityProvider,
    "demo": DemoIdentityProvider,
}

def get_identity_provider():
    """Зависимость: провайдер выбирается настройкой AUTH_PROVIDER."""
    return PROVIDERS[settings.AUTH_PROVIDER]()


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """Возвращает текущего пользователя по JWT или бросает AuthError (401)."""
    if not token:
        raise AuthError("Not authenticated")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            raise AuthError("Could not validate credentials")
    except JWTError:
        raise AuthError("Could not validate credentials")
    user = db.get(User, user_id)
    if user is None:
        raise AuthError("Could not validate credentials")
    return user

def require_role(*roles: RoleEnum):
    """Фабрика зависимости: пропускает только пользователей с одной из ролей."""
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning("User %s with role %s denied, needs %s", current_user.id, current_user.role.value,
                           [r.value for r in roles])
            raise AuthError("Insufficient privileges", status_code=403)
        return current_user
    return _checker
