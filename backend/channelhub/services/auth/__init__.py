from channelhub.services.auth.dto import AuthContext, LoginIn, LoginOut, TokenPair
from channelhub.services.auth.gate import AuthenticationGate
from channelhub.services.auth.service import AuthService

__all__ = [
    "AuthContext",
    "AuthService",
    "AuthenticationGate",
    "LoginIn",
    "LoginOut",
    "TokenPair",
]
