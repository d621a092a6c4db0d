class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised when input is malformed (blank reason, inverted dates, missing rejection comment)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class InvalidTransitionError(AppError):
    """Raised when an action is not legal from the request's current status."""
    def __init__(self, *, action: str, current_status: str):
        super().__init__(
            f"Cannot {action} a medical request that is {current_status}",
            status_code=409,
            details={"action": action, "current_status": current_status},
        )
        self.action = action
        self.current_status = current_status

class ConflictError(AppError):
    """Raised when a concurrent update changed the record between read and write."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class InvalidTargetError(AppError):
    """Raised when a forward names a lecturer that does not exist."""
    def __init__(self, lecturer_id: str):
        super().__init__(
            f"Lecturer with id {lecturer_id} does not exist",
            status_code=400,
            details={"lecturer_id": lecturer_id},
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class PermissionDeniedError(AppError):
    """Raised when the caller passed the role gate but does not own the resource."""
    def __init__(self, message: str):
        super().__init__(message, status_code=403)
