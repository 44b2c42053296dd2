# core/api/views.py

"""
SUCCESS ENVELOPE

EnvelopeMixin wraps every successful payload as {"success": true, "data": ...}.

- Paginated lists are already enveloped by EnvelopePagination (left alone).
- Error responses are enveloped by the exception handler (left alone).
- 204 responses carry no body.
"""

from __future__ import annotations

from rest_framework.response import Response


def ok(data=None, *, status=200, **extra) -> Response:
    payload = {"success": True, "data": data}
    payload.update(extra)
    return Response(payload, status=status)


class EnvelopeMixin:
    def finalize_response(self, request, response, *args, **kwargs):
        if (
            isinstance(response, Response)
            and 200 <= response.status_code < 300
            and response.status_code != 204
            and not (isinstance(response.data, dict) and "success" in response.data)
        ):
            response.data = {"success": True, "data": response.data}
        return super().finalize_response(request, response, *args, **kwargs)
