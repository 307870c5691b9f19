"""Typed failures raised by the domain services.

The HTTP layer maps each one to its ``status_code`` and a
``{"error": message}`` body.
"""


class ReliefError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ReliefError):
    status_code = 400


class Unauthorized(ReliefError):
    status_code = 401


class Forbidden(ReliefError):
    status_code = 403


class NotFound(ReliefError):
    status_code = 404


class Conflict(ReliefError):
    status_code = 409


class ServerError(ReliefError):
    status_code = 500
