"""
API error types.

Each error carries the HTTP status it maps to; main.py renders them
as {"error": message}.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class StoreError(ApiError):
    status_code = 500
