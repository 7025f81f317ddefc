class ErrorCodes:
    GENERIC_ERROR = "GENERIC_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    # Accounts
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    INVALID_AMOUNT = "INVALID_AMOUNT"

    # Spins
    PLAY_NOT_ALLOWED = "PLAY_NOT_ALLOWED"
    INVALID_BET = "INVALID_BET"

    # Symbol table
    SYMBOL_NOT_FOUND = "SYMBOL_NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
