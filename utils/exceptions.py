from typing import Any, Dict, List, Optional

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class ServiceException(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, dev_message: str = "", code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.dev_message = dev_message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "code": self.code,
            "message": self.message,
        }


class InvalidParameter(ServiceException):
    code = "INVALID_PARAMETER"
    status_code = 400

    def __init__(self, field: str, message: Optional[str] = None, dev_message: str = ""):
        super().__init__(message or f"Invalid value for parameter '{field}'", dev_message)
        self.field = field

    def to_dict(self):
        body = super().to_dict()
        body["field"] = self.field
        return body


class ValidationFailed(ServiceException):
    code = "VALIDATION_FAILED"
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None, dev_message: str = ""):
        super().__init__(message, dev_message)
        self.errors = errors or []

    def to_dict(self):
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class NotFound(ServiceException):
    code = "NOT_FOUND"
    status_code = 404


class StoreUnavailable(ServiceException):
    code = "STORE_UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str = "Log store is unavailable, try again later", dev_message: str = ""):
        super().__init__(message, dev_message)


class InternalError(ServiceException):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, dev_message: str = ""):
        super().__init__(GENERIC_ERROR_MESSAGE, dev_message)
