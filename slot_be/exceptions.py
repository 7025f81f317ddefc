from slot_be.error_codes import ErrorCodes

class AppException(Exception):
    def __init__(self, error_code, status_message, status_code, details=None):
        super().__init__(status_message)
        self.error_code = error_code
        self.status_message = status_message
        self.status_code = status_code
        self.details = details if details is not None else {}

class ValidationException(AppException):
    def __init__(self, status_message="Validation failed", details=None, error_code=ErrorCodes.VALIDATION_ERROR):
        super().__init__(
            error_code=error_code,
            status_message=status_message,
            status_code=422,
            details=details
        )

class NotFoundException(AppException):
    def __init__(self, status_message="Resource not found", details=None, error_code=ErrorCodes.NOT_FOUND):
        super().__init__(
            error_code=error_code,
            status_message=status_message,
            status_code=404,
            details=details
        )

class AccountNotFoundException(NotFoundException):
    """The caller supplied an account id or name that does not resolve."""
    def __init__(self, status_message="User not found", details=None):
        super().__init__(
            status_message=status_message,
            details=details,
            error_code=ErrorCodes.ACCOUNT_NOT_FOUND
        )

class PlayNotAllowedException(AppException):
    """The account has neither balance headroom nor free spins."""
    def __init__(self, status_message="User cannot play - insufficient balance and no free spins", details=None):
        super().__init__(
            error_code=ErrorCodes.PLAY_NOT_ALLOWED,
            status_message=status_message,
            status_code=400,
            details=details
        )

class ConfigurationException(AppException):
    """The symbol table is empty or carries no weight. Deployment defect, not a client error."""
    def __init__(self, status_message="Symbol table is misconfigured", details=None):
        super().__init__(
            error_code=ErrorCodes.CONFIGURATION_ERROR,
            status_message=status_message,
            status_code=500,
            details=details
        )

class InternalServerErrorException(AppException):
    def __init__(self, status_message="Internal server error", details=None):
        super().__init__(
            error_code=ErrorCodes.INTERNAL_SERVER_ERROR,
            status_message=status_message,
            status_code=500,
            details=details
        )
