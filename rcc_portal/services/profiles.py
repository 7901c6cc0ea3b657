import logging

from sqlalchemy.orm import Session

from rcc_portal.models.profiles import Profile, UserRole
from rcc_portal.schemas.profiles import ProfileUpdate
from rcc_portal.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def get_profile(db: Session, profile_id: int) -> Profile:
    profile = db.get(Profile, profile_id)
    if not profile:
        raise NotFoundError("Perfil não encontrado.")
    return profile


def update_profile(db: Session, profile: Profile, payload: ProfileUpdate) -> Profile:
    profile.nome = payload.nome.strip()
    profile.telefone = payload.telefone or None
    profile.endereco = payload.endereco or None
    db.commit()
    db.refresh(profile)
    logger.info("Profile %s updated", profile.id)
    return profile


def set_avatar(db: Session, profile: Profile, url: str) -> Profile:
    profile.avatar_url = url
    db.commit()
    db.refresh(profile)
    return profile


def set_role(db: Session, profile_id: int, role: UserRole) -> Profile:
    profile = get_profile(db, profile_id)
    profile.role = UserRole(role).value
    db.commit()
    db.refresh(profile)
    logger.info("Profile %s role set to %s", profile.id, profile.role)
    return profile
