"""Workflow errors, expressed as DRF exceptions so views can let them propagate."""

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError


class NotFoundError(NotFound):
    default_detail = "Not found."


class ConflictError(APIException):
    status_code    = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state."
    default_code   = "conflict"


__all__ = ["ConflictError", "NotFoundError", "ValidationError"]
