import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from rcc_portal.core.security import (
    RESET_PURPOSE,
    create_access_token,
    create_reset_token,
    decode_token,
    get_password_hash,
    new_jti,
    verify_password,
)
from rcc_portal.models.profiles import Profile, UserRole

logger = logging.getLogger(__name__)


class EmailTakenError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


class InvalidResetTokenError(Exception):
    pass


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_profile_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.scalar(select(Profile).where(Profile.email == normalize_email(email)))


def sign_up(
    db: Session,
    *,
    email: str,
    password: str,
    nome: str,
    telefone: Optional[str] = None,
    endereco: Optional[str] = None,
) -> Profile:
    if get_profile_by_email(db, email):
        raise EmailTakenError("Este email já está cadastrado")

    profile = Profile(
        email=normalize_email(email),
        nome=nome.strip(),
        telefone=telefone or None,
        endereco=endereco or None,
        password_hash=get_password_hash(password),
        role=UserRole.SERVO.value,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Profile %s signed up", profile.id)
    return profile


def issue_token(db: Session, profile: Profile) -> str:
    """Rotate the profile's jti and return a token bound to it."""
    profile.token_jti = new_jti()
    db.commit()
    return create_access_token({"sub": str(profile.id)}, jti=profile.token_jti)


def sign_in(db: Session, *, email: str, password: str) -> tuple[str, Profile]:
    profile = get_profile_by_email(db, email)
    if not profile or not verify_password(password, profile.password_hash):
        raise InvalidCredentialsError("Email ou senha incorretos")
    token = issue_token(db, profile)
    logger.info("Profile %s signed in", profile.id)
    return token, profile


def sign_out(db: Session, profile: Profile) -> None:
    profile.token_jti = None
    db.commit()
    logger.info("Profile %s signed out", profile.id)


def profile_from_token(db: Session, token: str) -> Optional[Profile]:
    payload = decode_token(token)
    if not payload:
        return None
    try:
        profile_id = int(payload.get("sub", ""))
    except ValueError:
        return None
    profile = db.get(Profile, profile_id)
    if not profile or not profile.token_jti or profile.token_jti != payload.get("jti"):
        return None
    return profile


def request_password_reset(db: Session, email: str) -> Optional[str]:
    """Return a reset token for a known email, None otherwise."""
    profile = get_profile_by_email(db, email)
    if not profile:
        return None
    if not profile.token_jti:
        profile.token_jti = new_jti()
        db.commit()
    logger.info("Password reset requested for profile %s", profile.id)
    return create_reset_token(profile.email, jti=profile.token_jti)


def reset_password(db: Session, *, token: str, password: str) -> Profile:
    payload = decode_token(token, purpose=RESET_PURPOSE)
    if not payload:
        raise InvalidResetTokenError("Link de recuperação inválido ou expirado.")
    profile = get_profile_by_email(db, payload.get("sub", ""))
    if not profile or not profile.token_jti or profile.token_jti != payload.get("jti"):
        raise InvalidResetTokenError("Link de recuperação inválido ou expirado.")

    profile.password_hash = get_password_hash(password)
    # invalidates the reset token and every open session
    profile.token_jti = None
    db.commit()
    logger.info("Password reset for profile %s", profile.id)
    return profile
