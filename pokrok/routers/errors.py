"""Translation of service errors into HTTP errors."""
from fastapi import HTTPException, status


def http_error(error: ValueError) -> HTTPException:
    """404 for "... not found" messages, 400 for any other business-rule error."""
    message = str(error)
    if "not found" in message.lower():
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
