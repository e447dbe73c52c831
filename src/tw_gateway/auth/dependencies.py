"""FastAPI dependency: require_admin.

Usage in admin routers:
    @router.post("/wars/{war_id}/settle")
    async def settle(admin: Annotated[str, Depends(require_admin)]): ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from starlette.requests import Request

from src.tw_common.errors import AdminRequiredError, InvalidCredentialsError
from src.tw_gateway.auth.jwt_handler import ADMIN_ROLE, JwtHandler

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/admin/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_jwt_handler(request: Request) -> JwtHandler:
    handler: JwtHandler = request.app.state.services.jwt
    return handler


async def require_admin(
    token: str = Depends(oauth2_scheme),
    jwt_handler: JwtHandler = Depends(get_jwt_handler),
) -> str:
    """Validate the Bearer token and return the admin username.

    HTTP 401 for a missing, invalid or expired token; AdminRequiredError (403)
    for a valid token without the admin role.
    """
    try:
        payload = jwt_handler.decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None
    if payload.get("role") != ADMIN_ROLE:
        raise AdminRequiredError()
    return str(payload["sub"])
