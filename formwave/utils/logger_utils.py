import logging
from typing import Optional
from formwave.exceptions.custom_exception import CustomException

# Single logger instance for the entire application
logger = logging.getLogger("formwave")


def log_info(context: str, message: str) -> None:
    """Log informational message with context"""
    logger.info(f"[{context}] {message}")


def log_warning(context: str, message: str) -> None:
    """Log warning message with context"""
    logger.warning(f"[{context}] {message}")


def _describe(error: Exception) -> str:
    return str(error) if str(error) else error.__class__.__name__


def handle_service_error(
    error: Exception,
    context: str,
    custom_exception: Optional[CustomException] = None
) -> None:
    """
    Handle service layer errors with logging

    Args:
        error: The exception that occurred
        context: Context information (e.g., 'create_form', 'submit_answers')
        custom_exception: Optional CustomException to raise, if None raises the original error

    Raises:
        CustomException or the original exception
    """
    logger.error(f"[SERVICE ERROR] {context}: {_describe(error)}", exc_info=True)

    if custom_exception:
        raise custom_exception from error
    raise error


def handle_route_error(
    error: Exception,
    context: str
) -> None:
    # Domain errors were already logged where they were raised
    if isinstance(error, CustomException):
        logger.debug(f"[ROUTE] {context}: {error.status_code} {error.message}")
        raise error

    logger.error(f"[ROUTE ERROR] {context}: {_describe(error)}", exc_info=True)
    raise error


def handle_middleware_error(
    error: Exception,
    context: str,
    custom_exception: Optional[CustomException] = None
) -> None:

    logger.error(f"[MIDDLEWARE ERROR] {context}: {_describe(error)}")

    if custom_exception:
        raise custom_exception from error
    raise error


def log_database_operation(
    operation: str,
    context: str,
    details: Optional[dict] = None
) -> None:

    message = f"[DB {operation}] {context}"
    if details:
        message += f" - {details}"
    logger.debug(message)
