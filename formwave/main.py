from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from formwave.config.database_config import Base, engine
from formwave.config.env_config import settings
from formwave.config.logger_config import setup_logging
from formwave.exceptions import (
    CustomException,
    FormValidationError,
    custom_exception_handler,
    form_validation_exception_handler,
    validation_exception_handler,
)
from formwave.models import form_model, user_model  # noqa: F401  registers tables
from formwave.routes.builder_router import builder_controller
from formwave.routes.form_router import form_controller
from formwave.routes.public_router import public_controller
from formwave.routes.users_router import user_controller
from formwave.utils.logger_utils import log_info

# Initialize logging
setup_logging()

app = FastAPI(
    title="FormWave",
    swagger_ui_parameters={
        "persistAuthorization": True
    }
)

log_info(context="APP_STARTUP", message="FormWave API started")


@app.get("/health")
def server_life_check():
    return {"statusCode": 200, "data": "Your server is running successfully"}


Base.metadata.create_all(bind=engine)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(FormValidationError, form_validation_exception_handler)
app.add_exception_handler(CustomException, custom_exception_handler)

app.include_router(user_controller, prefix="/user", tags=["Users"])
app.include_router(form_controller, prefix="/forms", tags=["Forms"])
app.include_router(builder_controller, prefix="/builder", tags=["Builder"])
app.include_router(public_controller, prefix="/public/forms", tags=["Public forms"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
