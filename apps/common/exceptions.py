from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler


class BusinessRuleError(APIException):
    """A request that breaks a business rule; never retried."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid operation."
    default_code = "INVALID_OPERATION"


class ResourceNotFound(BusinessRuleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "NOT_FOUND"


class InvalidStateTransition(BusinessRuleError):
    default_detail = "Invalid state."
    default_code = "INVALID_STATE"


class InsufficientInventory(BusinessRuleError):
    default_detail = "Inventory insufficient."
    default_code = "INSUFFICIENT_INVENTORY"


class UnknownItemType(BusinessRuleError):
    default_detail = "Unknown item type."
    default_code = "UNKNOWN_ITEM_TYPE"


class PaymentProcessingError(APIException):
    """Unexpected failure while settling a payment. The cause is chained."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to update payment."
    default_code = "PAYMENT_PROCESSING_ERROR"


def custom_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return response

    if isinstance(exc, ValidationError):
        response.data = {
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Please check the submitted values.",
                "details": response.data,
            },
        }
        return response

    if isinstance(exc, (BusinessRuleError, PaymentProcessingError)):
        response.data = {
            "success": False,
            "error": {
                "code": exc.default_code,
                "message": str(exc.detail),
                "details": {},
            },
        }
        return response

    details = response.data if isinstance(response.data, dict) else {"detail": response.data}
    code = _default_error_code(response.status_code)
    message = _default_error_message(response.status_code)

    response.data = {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details,
        },
    }
    return response


def _default_error_code(status_code: int) -> str:
    mapping = {
        status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
        status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
        status.HTTP_403_FORBIDDEN: "FORBIDDEN",
        status.HTTP_404_NOT_FOUND: "NOT_FOUND",
        status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
        status.HTTP_429_TOO_MANY_REQUESTS: "TOO_MANY_REQUESTS",
    }
    return mapping.get(status_code, "API_ERROR")


def _default_error_message(status_code: int) -> str:
    mapping = {
        status.HTTP_400_BAD_REQUEST: "Bad request.",
        status.HTTP_401_UNAUTHORIZED: "Authentication is required.",
        status.HTTP_403_FORBIDDEN: "You do not have permission to perform this action.",
        status.HTTP_404_NOT_FOUND: "Resource not found.",
        status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed.",
        status.HTTP_429_TOO_MANY_REQUESTS: "Too many requests.",
    }
    return mapping.get(status_code, "An error occurred while processing the request.")
