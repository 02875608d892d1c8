"""
Action result boundary.

Every business operation returns an ActionResult instead of raising:

    {"success": true, "data": ...}
    {"success": false, "error": "..."}

Services raise ActionError (or a subclass) for expected rejections; the
@action decorator turns those into failed results and turns any other
exception into a failed result carrying the operation's failure message
after logging the traceback.
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ActionError(Exception):
    """Expected rejection of an action (validation, ownership, stock)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(ActionError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(ActionError):
    status_code = status.HTTP_403_FORBIDDEN


@dataclass
class ActionResult:
    success: bool
    error: Optional[str] = None
    data: Any = None
    extra: dict = field(default_factory=dict)
    status_code: int = status.HTTP_200_OK

    @classmethod
    def ok(cls, data=None, **extra):
        return cls(success=True, data=data, extra=extra)

    @classmethod
    def fail(cls, error, status_code=status.HTTP_400_BAD_REQUEST):
        return cls(success=False, error=error or 'Operation failed', status_code=status_code)

    def to_dict(self, data=None):
        """Serialize to the wire shape; `data` overrides the raw payload."""
        if not self.success:
            return {'success': False, 'error': self.error}
        payload = {'success': True}
        value = self.data if data is None else data
        if value is not None:
            payload['data'] = value
        payload.update(self.extra)
        return payload


def action(failure_message):
    """
    Wrap a service function so it never raises past its boundary.

    Usage:
        @action('Failed to create invoice')
        def create_invoice(...):
            ...
            return ActionResult.ok(invoice)

    A plain return value is wrapped in ActionResult.ok().
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except ActionError as exc:
                logger.warning(f"{func.__qualname__} rejected: {exc.message}")
                return ActionResult.fail(exc.message, status_code=exc.status_code)
            except Exception:
                logger.exception(f"Error in {func.__qualname__}")
                return ActionResult.fail(failure_message, status_code=status.HTTP_400_BAD_REQUEST)

            if isinstance(result, ActionResult):
                return result
            return ActionResult.ok(result)
        return wrapper
    return decorator


def action_response(result, serializer_class=None, many=False, success_status=status.HTTP_200_OK, context=None):
    """Map an ActionResult onto a DRF Response."""
    if not result.success:
        return Response(result.to_dict(), status=result.status_code)

    data = None
    if serializer_class is not None and result.data is not None:
        data = serializer_class(result.data, many=many, context=context or {}).data
    return Response(result.to_dict(data), status=success_status)


def require(value, message):
    """Raise ActionError(message) when value is falsy."""
    if not value:
        raise ActionError(message)
    return value


def get_or_404(model, message, **lookup):
    """Fetch a single row or raise NotFound(message)."""
    try:
        return model.objects.get(**lookup)
    except (model.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound(message)


def request_payload(request):
    """Request body as a plain dict (form posts arrive as a QueryDict)."""
    data = request.data
    if hasattr(data, 'dict'):
        return data.dict()
    return dict(data)
