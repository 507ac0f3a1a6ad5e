# apps/core/utils.py

import json
import math
from datetime import date
from typing import Dict, List, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils.dateparse import parse_date, parse_datetime


# === RESPONSE ENVELOPE ===

def api_response(data=None, message: Optional[str] = None, status: int = 200, **extra) -> JsonResponse:
    """
    Build the standard {success, message?, data?} envelope

    Extra keyword arguments land at the top level (count, total, page...).
    """
    body = {'success': 200 <= status < 400}
    if message is not None:
        body['message'] = message
    body.update(extra)
    if data is not None:
        body['data'] = data
    return JsonResponse(body, status=status)


def api_error(message: str, status: int = 400) -> JsonResponse:
    return api_response(message=message, status=status)


def first_error(error) -> str:
    """First human readable message of a form or ValidationError"""
    if isinstance(error, ValidationError):
        return error.messages[0] if error.messages else 'Invalid data'

    for messages in error.errors.values():
        if messages:
            return messages[0]
    return 'Invalid data'


# === REQUEST PARSING ===

def parse_json_body(request) -> Dict:
    """
    Decode a JSON object body

    Raises ValidationError for malformed JSON or a non-object payload.
    An empty body is an empty object.
    """
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError('Invalid JSON body', code='invalid_json')

    if not isinstance(payload, dict):
        raise ValidationError('Invalid JSON body', code='invalid_json')
    return payload


def parse_date_value(value) -> Optional[date]:
    """
    Accept YYYY-MM-DD or a full ISO datetime (the date part is kept)

    Returns None for empty values, raises ValueError for garbage.
    """
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value

    value = str(value).strip()
    parsed = parse_date(value)
    if parsed is None:
        parsed_datetime = parse_datetime(value)
        if parsed_datetime is None:
            raise ValueError(f'Invalid date: {value}')
        parsed = parsed_datetime.date()
    return parsed


# === FILTERS ===

def filter_projects(queryset, params):
    """
    Apply the list filters shared by the table, kanban and export views

    params is a QueryDict: status, assignee (repeatable), fromDate, toDate.
    """
    from .models import Project

    status = params.get('status')
    if status:
        valid = [choice for choice, _ in Project.STATUS_CHOICES]
        if status not in valid:
            raise ValidationError(f"Status must be one of: {', '.join(valid)}", code='invalid_status')
        queryset = queryset.filter(status=status)

    assignees = [email.strip() for email in params.getlist('assignee') if email.strip()]
    if assignees:
        queryset = queryset.filter(assignee_set__email__in=assignees).distinct()

    try:
        from_date = parse_date_value(params.get('fromDate'))
        to_date = parse_date_value(params.get('toDate'))
    except ValueError as e:
        raise ValidationError(str(e), code='invalid_date')

    if from_date:
        queryset = queryset.filter(due_date__gte=from_date)
    if to_date:
        queryset = queryset.filter(due_date__lte=to_date)

    return queryset


# === PAGINATION ===

MAX_SQL_OFFSET = 2 ** 63 - 1


def _clamp_int(raw, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return value


def get_page_params(params) -> Tuple[int, int]:
    """(page, limit) from the query string, clamped to sane bounds"""
    limit = _clamp_int(
        params.get('limit'),
        settings.PROJECTS_PAGE_SIZE,
        1,
        settings.PROJECTS_MAX_PAGE_SIZE,
    )
    # The SQL OFFSET must fit a signed 64-bit integer
    page = _clamp_int(params.get('page'), 1, 1, MAX_SQL_OFFSET // limit)
    return page, limit


def paginate(queryset, page: int, limit: int) -> Tuple[List, Dict]:
    """
    Skip/limit pagination

    Returns the page items and the metadata the table view needs.
    """
    total = queryset.count()
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])

    meta = {
        'count': len(items),
        'total': total,
        'page': page,
        'limit': limit,
        'totalPages': math.ceil(total / limit) if total else 0,
    }
    return items, meta
