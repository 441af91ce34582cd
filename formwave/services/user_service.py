from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from formwave.schema.user_schema import SignUpRequest, SignInRequest, RequestContext
from formwave.exceptions import CustomException
from formwave.constants.error import ERROR
from formwave.models.user_model import Profile
from formwave.utils.auth_utils import verify_password, hash_password, generate_jwt, verify_jwt
from formwave.config.env_config import settings
import logging

logger = logging.getLogger(__name__)


def _profile_dict(profile: Profile) -> dict:
    return {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "created_at": profile.created_at,
    }


def _issue_tokens(claims: dict) -> dict:
    auth_token = generate_jwt(
        data=claims,
        expire_minutes=settings.ACCESS_TOKEN_EXP_TIME,
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    refresh_token = generate_jwt(
        data=claims,
        expire_minutes=settings.REFRESH_TOKEN_EXP_TIME,
        secret_key=settings.REFRESH_SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return {"authToken": auth_token, "refreshToken": refresh_token}


def sign_up_user(db: Session, data: SignUpRequest):
    """
    Create a profile with a hashed password
    """
    try:
        profile = Profile(
            email=data.email.lower(),
            full_name=data.full_name,
            password=hash_password(data.password),
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return _profile_dict(profile)

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error - email already exists: {e}")
        raise CustomException(status_code=409, message=ERROR.EMAIL_ALREADY_EXISTS)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error in sign_up_user: {e}", exc_info=True)
        raise CustomException(status_code=500, message=ERROR.INTERNAL_ERROR)


def sign_in_user(db: Session, data: SignInRequest):
    """
    Check email and password, return access and refresh tokens
    """
    try:
        profile = db.query(Profile).filter(Profile.email == data.email.lower()).first()
    except SQLAlchemyError as e:
        logger.error(f"Database error in sign_in_user: {e}", exc_info=True)
        raise CustomException(status_code=500, message=ERROR.INTERNAL_ERROR)

    if not profile or not verify_password(password=data.password, hashed=profile.password):
        raise CustomException(status_code=401, message=ERROR.INVALID_CREDENTIALS)

    claims = {"caller_id": profile.id, "email": profile.email, "full_name": profile.full_name}
    return {**_issue_tokens(claims), "user": _profile_dict(profile)}


def refresh_token(token: str):
    payload = verify_jwt(token=token, secret_key=settings.REFRESH_SECRET_KEY, algorithm=settings.ALGORITHM)
    if not payload:
        raise CustomException(status_code=401, message=ERROR.INVALID_REFRESH_TOKEN)

    claims = {key: payload[key] for key in ("caller_id", "email", "full_name") if key in payload}
    return _issue_tokens(claims)


def get_session(context: RequestContext):
    return {
        "user": {
            "id": context.caller_id,
            "email": context.email,
            "full_name": context.full_name,
        },
        "expires_at": context.exp,
    }
