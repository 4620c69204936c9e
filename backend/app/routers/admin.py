from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_admin, get_token_service
from app.models.admin import Admin
from app.schemas.admin import (
    AdminEnvelope,
    AdminLogin,
    AdminResponse,
    AdminSignup,
    AdminUpdate,
    AuthResponse,
)
from app.services import admin_service
from app.services.token_service import AdminIdentity, TokenService
from app.utils.exceptions import (
    AdminNotFoundError,
    EmailConflictError,
    InvalidAdminInputError,
    InvalidCredentialsError,
    InvalidIdError,
    LastAdminError,
    SelfDeleteError,
)

router = APIRouter(prefix="/admin")


def _auth_response(admin: Admin, tokens: TokenService) -> AuthResponse:
    token = tokens.issue(AdminIdentity(id=admin.id, email=admin.email))
    return AuthResponse(token=token, admin=AdminResponse.model_validate(admin))


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(
    body: AdminSignup,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    _caller: AdminIdentity = Depends(get_current_admin),
) -> AuthResponse:
    try:
        admin = admin_service.create_admin(db, body.email, body.password, body.name)
    except InvalidAdminInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EmailConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _auth_response(admin, tokens)


@router.post("/login", response_model=AuthResponse)
def login(
    body: AdminLogin,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    try:
        admin = admin_service.authenticate(db, body.email, body.password)
    except InvalidAdminInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    return _auth_response(admin, tokens)


@router.get("/me", response_model=AdminEnvelope)
def me(
    db: Session = Depends(get_db),
    caller: AdminIdentity = Depends(get_current_admin),
) -> AdminEnvelope:
    try:
        admin = admin_service.get_admin(db, caller.id)
    except AdminNotFoundError as e:
        raise HTTPException(status_code=404, detail="Not found") from e
    return AdminEnvelope(admin=AdminResponse.model_validate(admin))


@router.get("", response_model=list[AdminResponse])
def list_admins(
    db: Session = Depends(get_db),
    _caller: AdminIdentity = Depends(get_current_admin),
) -> list[AdminResponse]:
    return [AdminResponse.model_validate(a) for a in admin_service.list_admins(db)]


@router.put("/{admin_id}", response_model=AdminEnvelope)
def update_admin(
    admin_id: str,
    body: AdminUpdate,
    db: Session = Depends(get_db),
    _caller: AdminIdentity = Depends(get_current_admin),
) -> AdminEnvelope:
    try:
        admin = admin_service.update_admin(
            db, admin_id, email=body.email, name=body.name, password=body.password
        )
    except (InvalidIdError, InvalidAdminInputError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EmailConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except AdminNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return AdminEnvelope(admin=AdminResponse.model_validate(admin))


@router.delete("/{admin_id}")
def delete_admin(
    admin_id: str,
    db: Session = Depends(get_db),
    caller: AdminIdentity = Depends(get_current_admin),
) -> dict:
    try:
        admin_service.delete_admin(db, admin_id, requested_by=caller.id)
    except (InvalidIdError, LastAdminError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except SelfDeleteError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    except AdminNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"ok": True}
