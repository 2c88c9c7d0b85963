"""
FakeEnd Response Generator

Renders declared response bodies by substituting live request values into
placeholders.

Placeholders (applied to every string in the body, in this order):
- :name              path parameter bound by the route pattern
- {{query.name}}     query string parameter
- {{body.name}}      field of a JSON or form-encoded request body

A placeholder whose value is missing is left in the output as written.
"""

import json
import re
from typing import List, Dict, Any, Mapping, Optional
from dataclasses import dataclass, field
from urllib.parse import parse_qsl

from ..common import JSONValue, safe_json_parse

PATH_PLACEHOLDER = re.compile(r':(\w+)')
QUERY_PLACEHOLDER = re.compile(r'\{\{query\.(\w+)\}\}')
BODY_PLACEHOLDER = re.compile(r'\{\{body\.(\w+)\}\}')

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


@dataclass
class RequestContext:
    """Values available to placeholders while rendering one response."""

    path_params: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, str] = field(default_factory=dict)
    body_fields: Dict[str, Any] = field(default_factory=dict)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _substitute(pattern: re.Pattern, text: str, values: Mapping[str, Any]) -> str:
    def replace(match: re.Match) -> str:
        value = values.get(match.group(1))
        if value is None:
            return match.group(0)
        return _stringify(value)

    return pattern.sub(replace, text)


def interpolate(text: str, context: RequestContext) -> str:
    """
    Substitute placeholders in a single string.

    Example:
        ctx = RequestContext(path_params={'id': '42'})
        interpolate('User :id', ctx)  # 'User 42'
    """
    text = _substitute(PATH_PLACEHOLDER, text, context.path_params)
    text = _substitute(QUERY_PLACEHOLDER, text, context.query_params)
    text = _substitute(BODY_PLACEHOLDER, text, context.body_fields)
    return text


def render_template(template: JSONValue, context: RequestContext) -> JSONValue:
    """
    Render a response template against a request context.

    Strings at any depth are interpolated; lists and mappings are rebuilt in
    order (mapping keys are kept as written); other values pass through.

    Args:
        template: Declared response body
        context: Values from the incoming request

    Returns:
        New rendered body; the template is not modified
    """
    if isinstance(template, str):
        return interpolate(template, context)
    if isinstance(template, list):
        return [render_template(item, context) for item in template]
    if isinstance(template, dict):
        return {key: render_template(value, context) for key, value in template.items()}
    return template


def flatten_query(items: List[tuple]) -> Dict[str, str]:
    """
    Collapse repeated query parameters into one comma-joined value.

    Example:
        flatten_query([('tag', 'a'), ('tag', 'b'), ('q', 'x')])
        # {'tag': 'a,b', 'q': 'x'}
    """
    grouped: Dict[str, List[str]] = {}
    for key, value in items:
        grouped.setdefault(key, []).append(value)
    return {key: ','.join(values) for key, values in grouped.items()}


def parse_body_fields(content_type: Optional[str], raw_body: bytes) -> Dict[str, Any]:
    """
    Extract top-level fields from a request payload.

    JSON objects and form-encoded bodies yield fields; any other payload
    (arrays, plain text, binary) yields none.

    Args:
        content_type: Request Content-Type header (may be None)
        raw_body: Raw request body

    Returns:
        Dictionary of body fields
    """
    if not raw_body:
        return {}

    media_type = (content_type or '').split(';')[0].strip().lower()

    if media_type == FORM_CONTENT_TYPE:
        try:
            text = raw_body.decode('utf-8')
        except UnicodeDecodeError:
            return {}
        return flatten_query(parse_qsl(text, keep_blank_values=True))

    if not media_type or media_type.endswith('json'):
        parsed = safe_json_parse(raw_body)
        if isinstance(parsed, dict):
            return parsed

    return {}


def extract_request_context(
    path_params: Dict[str, str],
    query_items: List[tuple],
    content_type: Optional[str] = None,
    raw_body: bytes = b''
) -> RequestContext:
    """
    Build the placeholder context for an incoming request.

    Args:
        path_params: Parameters bound by the matched route
        query_items: Query string as (key, value) pairs
        content_type: Request Content-Type header
        raw_body: Raw request body

    Returns:
        RequestContext for render_template()
    """
    return RequestContext(
        path_params=dict(path_params),
        query_params=flatten_query(query_items),
        body_fields=parse_body_fields(content_type, raw_body)
    )
