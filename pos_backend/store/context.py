# store/context.py

"""
PATH: store/context.py

REQUEST STORE CONTEXT

Every ledger call is scoped to one store. The frontend sends the active
store identifier in the X-Store-Id header; authentication has already
resolved the user by the time a view reads it.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException

STORE_HEADER = "X-Store-Id"


class MissingStoreError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = f"{STORE_HEADER} header is required."
    default_code = "missing_store"


def get_request_store_uuid(request) -> str | None:
    raw = request.headers.get(STORE_HEADER)
    value = (raw or "").strip()
    return value or None


def require_store_uuid(request) -> str:
    store_uuid = get_request_store_uuid(request)
    if not store_uuid:
        raise MissingStoreError()
    return store_uuid


def get_request_user_id(request) -> str:
    user = getattr(request, "user", None)
    pk = getattr(user, "pk", None)
    return str(pk) if pk is not None else ""
