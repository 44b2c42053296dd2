# core/api/exception_handler.py

"""
API ERROR ENVELOPE

Every failed request is rendered as:

    {"success": false, "error": "...", "code": "...", "details": ...}

Handles:
- ColdStoreError subclasses (domain errors raised by services)
- DRF APIException subclasses (serializer validation, auth, throttling, 404)
- django.core.exceptions.ValidationError raised by model full_clean()
- ProtectedError when a referenced row is deleted (409 IN_USE)

Anything else propagates to Django (500) after being logged.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import ColdStoreError

logger = logging.getLogger(__name__)


_DRF_CODES = {
    drf_exceptions.ValidationError: "VALIDATION_ERROR",
    drf_exceptions.ParseError: "INVALID_REQUEST_BODY",
    drf_exceptions.NotAuthenticated: "NOT_AUTHENTICATED",
    drf_exceptions.AuthenticationFailed: "AUTHENTICATION_FAILED",
    drf_exceptions.PermissionDenied: "PERMISSION_DENIED",
    drf_exceptions.NotFound: "NOT_FOUND",
    drf_exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    drf_exceptions.Throttled: "THROTTLED",
}


def _drf_code(exc) -> str:
    for klass, code in _DRF_CODES.items():
        if isinstance(exc, klass):
            return code
    return "REQUEST_FAILED"


def _django_validation_details(exc: DjangoValidationError):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return {"non_field_errors": list(exc.messages)}


def envelope_exception_handler(exc, context):
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else None

    if isinstance(exc, ColdStoreError):
        logger.info(
            "Domain error",
            extra={"view": view_name, "code": exc.code, "error": exc.message},
        )
        return Response(exc.as_payload(), status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        return Response(
            {
                "success": False,
                "error": "Invalid data",
                "code": "VALIDATION_ERROR",
                "details": _django_validation_details(exc),
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, ProtectedError):
        return Response(
            {
                "success": False,
                "error": "Record is referenced by other records and cannot be deleted",
                "code": "IN_USE",
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound()

    response = drf_exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled API error", extra={"view": view_name})
        return None

    if isinstance(exc, drf_exceptions.ValidationError):
        payload = {
            "success": False,
            "error": "Invalid data",
            "code": "VALIDATION_ERROR",
            "details": response.data,
        }
    else:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        payload = {
            "success": False,
            "error": str(detail or exc),
            "code": _drf_code(exc),
        }

    response.data = payload
    return response
