from fastapi import status
from libs.result import Error

GENERIC_SERVER_MESSAGE = "Internal server error"


class ClientError(Exception):
    """4xx - the message is safe to show to the caller"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    """500 - only public_message reaches the caller, base_error stays in the logs"""

    def __init__(self, base_error: Error, public_message: str = GENERIC_SERVER_MESSAGE):
        self.base_error = base_error
        self.public_message = public_message
        super().__init__(base_error.message)
