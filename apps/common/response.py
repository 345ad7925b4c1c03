from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, message: str = "", status_code: int = status.HTTP_200_OK) -> Response:
    return Response({"success": True, "data": data, "message": message}, status=status_code)


def no_content_response() -> Response:
    return Response(status=status.HTTP_204_NO_CONTENT)
