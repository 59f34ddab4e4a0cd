"""Error taxonomy shared by services and the API layer"""
from typing import Optional


class SheetFormsError(Exception):
    """Base error carrying the HTTP status it maps to"""

    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class Unauthenticated(SheetFormsError):
    """No session, expired session, or credential refresh failed"""
    status_code = 401
    default_message = "Authentication required"


class InvalidArgument(SheetFormsError):
    """Missing required field or malformed identifier"""
    status_code = 400
    default_message = "Invalid request"


class Forbidden(SheetFormsError):
    """Remote access denied"""
    status_code = 403
    default_message = "Access to the spreadsheet is denied"


class NotFound(SheetFormsError):
    """Form, spreadsheet, sheet or row does not exist"""
    status_code = 404
    default_message = "Not found"


class Unknown(SheetFormsError):
    """Unclassified remote or storage failure"""
    status_code = 500
    default_message = "Unexpected error"
