from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from formwave.services import user_service
from formwave.schema.user_schema import SignUpRequest, SignInRequest, RefreshTokenRequest
from formwave.config.database_config import get_db
from formwave.constants.messages import MESSAGE
from formwave.middleware.auth_middleware import auth_middleware
from formwave.utils.logger_utils import handle_route_error, log_info

user_controller = APIRouter()


@user_controller.post("/signup", response_model=dict)
def signup_user(data: SignUpRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.sign_up_user(db, data)
        log_info(context="AUTH", message=f"Profile created for {user['email']}")
        return {"statusCode": 201, "message": MESSAGE.USER_CREATED, "data": user}
    except Exception as e:
        handle_route_error(error=e, context="POST /user/signup")


@user_controller.post("/signin", response_model=dict)
def signin_user(data: SignInRequest, db: Session = Depends(get_db)):
    try:
        response = user_service.sign_in_user(db, data)
        return {"statusCode": 200, "message": MESSAGE.AUTH_SUCCESS, "data": response}
    except Exception as e:
        handle_route_error(error=e, context="POST /user/signin")


@user_controller.post("/refresh-token", response_model=dict)
def refresh_user_token(data: RefreshTokenRequest):
    try:
        response = user_service.refresh_token(data.refresh_token)
        return {"statusCode": 200, "message": MESSAGE.TOKEN_REFRESHED, "data": response}
    except Exception as e:
        handle_route_error(error=e, context="POST /user/refresh-token")


@user_controller.post("/signout", response_model=dict, dependencies=[Depends(auth_middleware)])
def signout_user(request: Request):
    # Tokens are stateless; the client drops them
    log_info(context="AUTH", message=f"{request.state.user.caller_id} signed out")
    return {"statusCode": 200, "message": MESSAGE.LOGOUT_SUCCESS, "data": None}


@user_controller.get("/session", response_model=dict, dependencies=[Depends(auth_middleware)])
def get_user_session(request: Request):
    try:
        response = user_service.get_session(request.state.user)
        return {"statusCode": 200, "message": MESSAGE.SESSION_FOUND, "data": response}
    except Exception as e:
        handle_route_error(error=e, context="GET /user/session")
