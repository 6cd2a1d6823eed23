from rest_framework.response import Response
from rest_framework import status


def success_response(data=None, message=None, code=status.HTTP_200_OK):
    return Response({
        "message": message or [],
        "data": data if data is not None else {}
    }, status=code)


def flatten_errors(errors=None):
    # semua error dijadikan daftar pesan teks saja
    messages = []
    if isinstance(errors, dict):
        for field, msgs in errors.items():
            if isinstance(msgs, (list, tuple)):
                messages.extend(str(m) for m in msgs)
            else:
                messages.append(str(msgs))
    elif isinstance(errors, (list, tuple)):
        messages.extend(str(m) for m in errors)
    elif errors:
        messages.append(str(errors))
    return messages


def error_response(errors=None, status_code=status.HTTP_400_BAD_REQUEST):
    return Response({
        "message": flatten_errors(errors),
        "data": {}
    }, status=status_code)
