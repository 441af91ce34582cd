from fastapi.responses import JSONResponse
from formwave.exceptions.custom_exception import CustomException, FormValidationError


def custom_exception_handler(request, exc: CustomException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "statusCode": exc.status_code,
            "message": exc.message
        }
    )


def form_validation_exception_handler(request, exc: FormValidationError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "statusCode": exc.status_code,
            "errors": "Validation failed",
            "message": exc.errors
        }
    )
