"""
Errors raised by the dispatch pipeline.
"""


class MissingCredentialError(RuntimeError):
    """No long-lived key could be resolved for a request"""

    def __init__(self, message: str = "No token found. Provide an API key, a custom Authorization header, "
                                      "or a stored credential."):
        super().__init__(message)
