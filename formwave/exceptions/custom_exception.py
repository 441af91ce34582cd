from typing import Dict, List


class CustomException(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class FormValidationError(CustomException):
    """Field-level validation failure, raised before any store call"""

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__(status_code=400, message=errors[0]["message"] if errors else "Validation failed")
