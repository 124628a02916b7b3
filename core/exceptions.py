"""
Domain error taxonomy shared by every app.

Services raise these directly; DRF renders any ``APIException`` subclass as
a JSON error response, so views never translate them.

    - ValidationError: malformed input (400)
    - NotFound: missing order / appointment / promotion / transaction (404)
    - Conflict: duplicate bid, duplicate pending order, re-rating (409)
    - BusinessRule: the request is well formed but the current state forbids it (422)
"""
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError

__all__ = ['ValidationError', 'NotFound', 'Conflict', 'BusinessRule']


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('The resource already exists.')
    default_code = 'conflict'


class BusinessRule(APIException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = _('This operation is not allowed in the current state.')
    default_code = 'business_rule'
