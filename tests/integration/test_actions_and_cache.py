"""
Action result boundary and page cache tests.
"""

import pytest
from django.core.cache import cache
from rest_framework import status

from core.actions import ActionError, ActionResult, Forbidden, NotFound, action, action_response, get_or_404
from core.cache import cached_page, page_cache_key, revalidate_path
from farms.models import Farm


@action('Failed to do the thing')
def succeed(value):
    return value


@action('Failed to do the thing')
def reject(error_class, message):
    raise error_class(message)


@action('Failed to do the thing')
def crash():
    raise RuntimeError('database exploded')


class TestAction:

    def test_plain_return_is_wrapped(self):
        result = succeed({'id': 1})

        assert result.success is True
        assert result.data == {'id': 1}
        assert result.to_dict() == {'success': True, 'data': {'id': 1}}

    def test_expected_rejection_keeps_message_and_status(self):
        result = reject(Forbidden, 'Unauthorized')

        assert result.success is False
        assert result.error == 'Unauthorized'
        assert result.status_code == status.HTTP_403_FORBIDDEN
        assert result.to_dict() == {'success': False, 'error': 'Unauthorized'}

    def test_not_found_maps_to_404(self):
        assert reject(NotFound, 'Invoice not found').status_code == status.HTTP_404_NOT_FOUND

    def test_unexpected_error_uses_failure_message(self):
        result = crash()

        assert result.success is False
        assert result.error == 'Failed to do the thing'
        assert 'exploded' not in result.error

    def test_extra_keys_are_added_to_payload(self):
        result = ActionResult.ok([1, 2], pagination={'page': 1})
        assert result.to_dict() == {'success': True, 'data': [1, 2], 'pagination': {'page': 1}}

    def test_action_response_uses_result_status(self):
        response = action_response(ActionResult.fail('Invalid', status_code=status.HTTP_400_BAD_REQUEST))
        assert response.status_code == 400
        assert response.data == {'success': False, 'error': 'Invalid'}

    @pytest.mark.django_db
    def test_get_or_404_rejects_malformed_ids(self):
        with pytest.raises(NotFound):
            get_or_404(Farm, 'Farm not found', pk='not-a-uuid')

    def test_action_error_defaults_to_bad_request(self):
        assert ActionError('nope').status_code == status.HTTP_400_BAD_REQUEST


class TestPageCache:

    def test_cached_page_builds_once(self):
        calls = []

        def build():
            calls.append(1)
            return {'total': 3}

        assert cached_page('/admin/summary', build) == {'total': 3}
        assert cached_page('/admin/summary', build) == {'total': 3}
        assert len(calls) == 1

    def test_revalidate_path_drops_payload(self):
        cached_page('/admin/summary/', lambda: {'total': 1})
        revalidate_path('/admin/summary')

        assert cache.get(page_cache_key('/admin/summary')) is None
        assert cached_page('/admin/summary', lambda: {'total': 2}) == {'total': 2}
