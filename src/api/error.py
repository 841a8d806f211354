from typing import Dict, Optional

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    """4xx carrying a business Error; rendered as {"error": {"code", "message"}}"""

    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)


class ServerError(Exception):
    """5xx; only the code reaches the client, never the message"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)
