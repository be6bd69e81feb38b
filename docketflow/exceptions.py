"""
Project-wide DRF exception handler.

Every error body is flattened to {"message": ..., "field": ...} where
"message" is the first failing message and "field" its dotted path.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("docketflow.api")

NON_FIELD_KEYS = ("detail", "non_field_errors")


def first_error(detail, path=()):
    """Walk a DRF error structure and return (field_path, message) of the first leaf."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            sub_path = path if key in NON_FIELD_KEYS else path + (str(key),)
            found = first_error(value, sub_path)
            if found is not None:
                return found
        return None
    if isinstance(detail, (list, tuple)):
        for index, value in enumerate(detail):
            # Nested list serializers report one entry per child; skip the clean ones.
            sub_path = path + (str(index),) if isinstance(value, dict) else path
            found = first_error(value, sub_path)
            if found is not None:
                return found
        return None
    if detail in (None, ""):
        return None
    return ".".join(path) or None, str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", type(view).__name__ if view else "unknown view",
            exc_info=exc,
        )
        return Response(
            {"message": "Something went wrong. Please try again."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    found = first_error(response.data)
    if found is None:
        body = {"message": "Request failed."}
    else:
        field, message = found
        body = {"message": message}
        if field:
            body["field"] = field
    response.data = body
    return response
