"""Request wrapper applied to every route.

Handles, in order:
1. CORS preflight short-circuit
2. API key check on private paths
3. Last-resort conversion of uncaught errors into a JSON 500
4. CORS headers on every response
"""
import logging

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from config import get_settings

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, PUT, DELETE, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
    'Access-Control-Max-Age': '86400',
}

API_KEY_HEADER = 'x-api-key'

async def edge_middleware(request: Request, call_next) -> Response:
    """Wrap a request with preflight, access control and error envelope."""
    if request.method == 'OPTIONS':
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    path = request.url.path

    try:
        settings = get_settings()
        if settings.is_private_path(path) and not settings.is_valid_api_key(
            request.headers.get(API_KEY_HEADER, '')
        ):
            logger.warning(f"Rejected request to {path}: invalid API key")
            response = JSONResponse(
                {'error': 'Unauthorized - Invalid API key'},
                status_code=status.HTTP_401_UNAUTHORIZED
            )
        else:
            response = await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {path}: {e}")
        response = JSONResponse(
            {'error': str(e)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    response.headers.update(CORS_HEADERS)
    return response
