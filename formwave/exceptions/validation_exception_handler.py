from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi import status
from formwave.constants.error import ERROR


def _field_path(loc) -> str:
    # ("body", "answers", "q1") -> "answers.q1"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) if parts else "body"


def validation_exception_handler(request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        field = _field_path(err.get("loc", ()))
        message = err["msg"]
        if err.get("type") == "missing":
            message = getattr(ERROR, f"REQUIRED_{field.split('.')[-1].upper()}", message)
        errors.append({"field": field, "message": message})

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "statusCode": 400,
            "errors": "Validation failed",
            "message": errors
        }
    )
