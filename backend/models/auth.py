"""
PromoterPro - Modeles Auth
One shared secret per role; promoters gate their own view with a password.
"""

from enum import Enum
from pydantic import BaseModel


class UserRole(str, Enum):
    LEAD = "LEAD"
    PROMOTER = "PROMOTER"
    VERIFIER = "VERIFIER"
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"


class PromoterAuthMode(str, Enum):
    CREATE_PASSWORD = "CREATE_PASSWORD"
    LOGIN = "LOGIN"


class UserLogin(BaseModel):
    username: str
    password: str


class PasswordCreate(BaseModel):
    password: str
    confirm_password: str


class PasswordLogin(BaseModel):
    password: str


class PasswordReset(BaseModel):
    admin_secret: str


class SessionResponse(BaseModel):
    token: str
    role: UserRole
    promoter_id: str = ""
