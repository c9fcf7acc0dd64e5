"""
ERRORS MODULE
=============

Exceptions raised by the services and translated at the HTTP boundary.

  MalformedRequestError   - 400; missing body or blank prompt. Message is shown as is.
  UpstreamContractError   - 500; the model answered but without usable text.
  UpstreamTransportError  - 500; the model call itself failed (network, auth, rate limit).
  ConfigError             - startup only; required configuration is missing or invalid.

Upstream errors always expose the same generic public message; the real detail
goes to the server log only.
"""

GENERIC_FAILURE_MESSAGE = "Failed to get completion"


class TransformBotError(Exception):
    """Base class for errors that map to an HTTP status and a public message."""

    status_code = 500
    public_message = GENERIC_FAILURE_MESSAGE


class MalformedRequestError(TransformBotError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class UpstreamContractError(TransformBotError):
    pass


class UpstreamTransportError(TransformBotError):
    pass


class ConfigError(Exception):
    pass
