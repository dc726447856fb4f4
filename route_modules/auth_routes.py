"""
Auth Routes - owner signup and login.
"""
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from models import RegisterOwnerRequest, Owner, Token
from service_modules.auth_service import get_auth_service, AuthService

router = APIRouter()


@router.post("/api/auth/register", response_model=Owner)
def register_owner(
    data: RegisterOwnerRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign up a new gym owner."""
    return service.register_owner(data)


@router.post("/api/auth/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    """Exchange username/password for a bearer token."""
    return service.authenticate(form_data.username, form_data.password)
