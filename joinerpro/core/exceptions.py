"""
Error taxonomy and the DRF exception handler.

Every error leaves the API as a JSON object with a human-readable
``message``; field validation failures also carry ``errors``.
"""
import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('joinerpro.core')


class ConflictError(APIException):
    """Uniqueness or referential conflict"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with existing data.'
    default_code = 'conflict'


class AlreadySettledError(ConflictError):
    default_detail = 'This account has already been settled.'
    default_code = 'already_settled'


def _first_message(detail):
    """Dig the first readable message out of a DRF error detail structure"""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return 'Invalid input.'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid input.'
    return str(detail)


def joinerpro_exception_handler(exc, context):
    request = context.get('request')
    path = getattr(request, 'path', 'unknown')

    if isinstance(exc, ProtectedError):
        logger.info(f"Delete blocked by dependent rows in {path}: {exc}")
        return Response(
            {'message': 'This record cannot be deleted because other records depend on it.'},
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity conflict in {path}: {exc}")
        return Response(
            {'message': 'The request conflicts with existing data.'},
            status=status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)
    if response is None:
        logger.error(f"Unhandled error in {path}: {exc}", exc_info=exc)
        return Response(
            {'message': 'Internal server error.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            'message': _first_message(exc.detail),
            'errors': exc.detail,
        }
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'message': str(response.data['detail'])}
    return response
