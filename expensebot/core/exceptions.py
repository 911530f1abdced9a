from typing import Optional, Any

class ExpenseBotError(Exception):
    """
    Base exception for ExpenseBot application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(ExpenseBotError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ExpenseNotFoundError(ResourceNotFoundError):
    """
    Raised when no expense is stored under the requested id.
    """
    def __init__(self, expense_id: str):
        super().__init__(f"expense {expense_id} not found", details={"expense_id": expense_id})
        self.expense_id = expense_id

class AuthenticationError(ExpenseBotError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class StorageError(ExpenseBotError):
    """
    Raised when the record store cannot read, write or decode a record.
    """
    def __init__(self, message: str = "Storage error", details: Optional[Any] = None):
        super().__init__(message, code="STORAGE_ERROR", status_code=500, details=details)

class ExternalServiceError(ExpenseBotError):
    """
    Raised when an external service fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None, status_code: int = 502):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=status_code, details=details)

class ChatServiceError(ExternalServiceError):
    """
    Raised when posting, updating or looking up data on the chat server fails.
    """
    pass
