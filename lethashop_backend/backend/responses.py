# backend/responses.py

"""
API ERROR NORMALIZATION

Domain failures (not serializer validation) are returned in one shape:
    {"error": {"code": "...", "message": "..."}}
"""

from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )
