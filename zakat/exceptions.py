# zakat/exceptions.py
import logging

from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import (
    ValidationError, NotAuthenticated, AuthenticationFailed,
    PermissionDenied, NotFound
)
from django.http import Http404
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied

from .utils import flatten_errors

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Menyeragamkan bentuk respons untuk semua error:
    { "message": [..], "data": {} }
    dengan status code yang sesuai (401/403/404/400/500)
    """
    response = exception_handler(exc, context)

    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        http_status = status.HTTP_401_UNAUTHORIZED
        messages = [str(getattr(exc, "detail", "Data login tidak diberikan."))]
    elif isinstance(exc, (PermissionDenied, DjangoPermissionDenied)):
        http_status = status.HTTP_403_FORBIDDEN
        messages = ["Anda tidak memiliki izin untuk permintaan ini."]
    elif isinstance(exc, (NotFound, Http404)):
        http_status = status.HTTP_404_NOT_FOUND
        messages = ["Data tidak ditemukan."]
    elif isinstance(exc, ValidationError):
        http_status = status.HTTP_400_BAD_REQUEST
        messages = flatten_errors(getattr(exc, "detail", exc))
    else:
        http_status = response.status_code if response else status.HTTP_500_INTERNAL_SERVER_ERROR
        if response is None:
            view = context.get("view")
            logger.exception("Unhandled error in %s", type(view).__name__ if view else "view")
        messages = [str(getattr(exc, "detail", "Terjadi kesalahan yang tidak terduga."))]

    body = {
        "message": messages,
        "data": {}
    }
    return Response(body, status=http_status)
