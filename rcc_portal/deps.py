from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from rcc_portal.database.db import get_db
from rcc_portal.models.profiles import Profile, UserRole
from rcc_portal.services.auth import profile_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/sign-in", auto_error=False)


def get_optional_profile(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    if not token:
        return None
    return profile_from_token(db, token)


def get_current_profile(profile: Optional[Profile] = Depends(get_optional_profile)) -> Profile:
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Você precisa estar logado.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile


def require_staff(profile: Profile = Depends(get_current_profile)) -> Profile:
    if not profile.is_staff:
        raise HTTPException(status_code=403, detail="Você não tem permissão para acessar esta página.")
    return profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Você não tem permissão para acessar esta página.")
    return profile
