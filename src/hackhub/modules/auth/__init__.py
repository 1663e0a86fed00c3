"""Staff authentication module."""

from hackhub.modules.auth.router import router
from hackhub.modules.auth.schemas import LoginRequest, LoginResponse, TokenResponse

__all__ = ["router", "LoginRequest", "LoginResponse", "TokenResponse"]
