import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from rcc_portal.database.db import get_db
from rcc_portal.deps import get_current_profile
from rcc_portal.models.profiles import Profile
from rcc_portal.schemas.auth import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SignInRequest,
    SignUpRequest,
    TokenOut,
)
from rcc_portal.schemas.profiles import ProfileOut
from rcc_portal.services.auth import (
    EmailTakenError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    request_password_reset,
    reset_password,
    sign_in,
    sign_out,
    sign_up,
)
from rcc_portal.tasks import send_password_reset_email_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up", response_model=ProfileOut, status_code=201)
def create_account(payload: SignUpRequest, db: Session = Depends(get_db)):
    try:
        return sign_up(
            db,
            email=payload.email,
            password=payload.password,
            nome=payload.nome,
            telefone=payload.telefone,
            endereco=payload.endereco,
        )
    except EmailTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/sign-in", response_model=TokenOut)
def login(payload: SignInRequest, db: Session = Depends(get_db)):
    try:
        token, _ = sign_in(db, email=payload.email, password=payload.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return TokenOut(access_token=token)


@router.post("/sign-out", status_code=204)
def logout(profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)):
    sign_out(db, profile)
    return Response(status_code=204)


@router.get("/session", response_model=ProfileOut)
def current_session(profile: Profile = Depends(get_current_profile)):
    return profile


@router.post("/forgot-password", status_code=status.HTTP_202_ACCEPTED)
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    token = request_password_reset(db, payload.email)
    if token:
        # mail delivery must not fail the request
        try:
            send_password_reset_email_task.delay(payload.email, token)
        except Exception:
            logger.exception("Could not enqueue password reset mail")
    return {"detail": "Verifique seu e-mail para redefinir sua senha."}


@router.post("/reset-password", status_code=204)
def change_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        reset_password(db, token=payload.token, password=payload.password)
    except InvalidResetTokenError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(status_code=204)
