# Server package

from .errors import ErrorCode, VodError
from .models import User, UserInfo, RequestContext
from .ports import UserStore
from .db import PeeweeUserStore
from .services import UserService
from .server import VodServer, create_app

__all__ = [
    "ErrorCode",
    "VodError",
    "User",
    "UserInfo",
    "RequestContext",
    "UserStore",
    "PeeweeUserStore",
    "UserService",
    "VodServer",
    "create_app",
]
