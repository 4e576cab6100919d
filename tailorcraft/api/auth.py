# tailorcraft/api/auth.py
# Роуты для регистрации и входа (выдача JWT).
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tailorcraft.core import security
from tailorcraft.core.errors import AuthError, ValidationError
from tailorcraft.db.session import get_db
from tailorcraft.models.user import User, RoleEnum
from tailorcraft.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Регистрация покупателя: email + password.
    Роль всегда CUSTOMER, админов и мастеров заводят отдельно.
    """
    email = payload.email.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise ValidationError("Email already registered", field="email")
    user = User(
        id=f"u-{uuid.uuid4().hex[:12]}",
        name=payload.name,
        email=email,
        password_hash=security.get_password_hash(payload.password),
        role=RoleEnum.CUSTOMER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered customer %s", user.id)
    return user

@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    provider=Depends(security.get_identity_provider),
):
    """Логин: возвращает токен и краткие данные пользователя."""
    try:
        user = provider.authenticate(db, payload.email.strip().lower(), payload.password)
    except AuthError:
        logger.warning("Failed login for %s", payload.email)
        raise
    token = security.create_access_token(subject=user.id, role=user.role)
    return {"token": token, "user": user}
