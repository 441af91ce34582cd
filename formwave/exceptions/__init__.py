from formwave.exceptions.custom_exception import CustomException, FormValidationError
from formwave.exceptions.custom_exception_handler import custom_exception_handler, form_validation_exception_handler
from formwave.exceptions.validation_exception_handler import validation_exception_handler

__all__ = [
    "CustomException",
    "FormValidationError",
    "custom_exception_handler",
    "form_validation_exception_handler",
    "validation_exception_handler",
]
