from fastapi import Request
from formwave.utils.auth_utils import verify_jwt
from formwave.config.env_config import settings
from formwave.exceptions.custom_exception import CustomException
from formwave.constants.error import ERROR
from formwave.schema.user_schema import RequestContext
from formwave.utils.logger_utils import handle_middleware_error


def auth_middleware(request: Request):
    try:
        token = request.headers.get("Authorization")
        if token is None:
            raise CustomException(status_code=401, message="Authorization header missing")

        if token.startswith("Bearer "):
            token = token[7:]

        payload = verify_jwt(
            token=token,
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM
        )

        if not payload or "caller_id" not in payload:
            raise CustomException(status_code=401, message=ERROR.UNAUTHORIZED)

        request.state.user = RequestContext(**payload)

    except Exception as e:
        handle_middleware_error(
            error=e,
            context="auth_middleware",
            custom_exception=CustomException(status_code=401, message=ERROR.UNAUTHORIZED)
        )
