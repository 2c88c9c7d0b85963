"""
FakeEnd Curl Generator

Turns a curl command into a YAML mock definition inside a mock directory.

The request's URL path decides where the definition goes: the literal
segments before the first path parameter become the file, the rest becomes
the declared path, so the loader resolves it back to the original route.

    curl https://api.example.com/api/users/:id
    -> mock_server/api/users.yaml  with  path: /:id
"""

import json
import logging
import random
import re
import shlex
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple, Union
from urllib.parse import urlparse, parse_qsl

import requests
import yaml

from ..common import HttpMethod, safe_json_parse

logger = logging.getLogger("fakeend.generate")

# Random delay range written into generated definitions (ms)
DELAY_RANGE = (50, 250)

EXECUTE_TIMEOUT = 30  # seconds

METHOD_FLAGS = {'-X', '--request'}
URL_FLAGS = {'--url'}
HEADER_FLAGS = {'-H', '--header'}
# Other flags whose next token is a value, not the URL
VALUE_FLAGS = {
    '-u', '--user', '-o', '--output', '-A', '--user-agent', '-b', '--cookie',
    '-e', '--referer', '-m', '--max-time', '--connect-timeout', '-x', '--proxy',
}
DATA_FLAGS = {'-d', '--data', '--data-raw', '--data-binary', '--data-urlencode'}

BRACE_PARAM = re.compile(r'^\{(\w+)\}$')
COLON_PARAM = re.compile(r'^:\w+$')
TRAILING_ID = re.compile(r'/\d+$')


class CurlParseError(ValueError):
    """Raised when a curl command can't be turned into a request."""


@dataclass
class CurlRequest:
    """Request described by a curl command."""

    method: str
    url: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    data: Optional[str] = None
    query_params: Dict[str, str] = field(default_factory=dict)


def parse_curl_command(curl_command: str) -> CurlRequest:
    """
    Parse a curl command line.

    Supports -X/--request, --url or a bare URL, -H/--header and the
    -d/--data family. Line continuations are joined. Unknown flags are
    ignored.

    Args:
        curl_command: Command as copied from a terminal or browser

    Returns:
        CurlRequest

    Raises:
        CurlParseError: If the command is not valid shell syntax or has no URL
    """
    cleaned = re.sub(r'\\\s*\n\s*', ' ', curl_command).strip()
    try:
        parts = shlex.split(cleaned)
    except ValueError as e:
        raise CurlParseError(f"Could not parse cURL command: {e}") from e

    if parts and parts[0].lower() == 'curl':
        parts = parts[1:]

    method = None
    url = None
    headers: Dict[str, str] = {}
    data = None

    i = 0
    while i < len(parts):
        arg = parts[i]
        value = parts[i + 1] if i + 1 < len(parts) else None

        if arg in METHOD_FLAGS and value is not None:
            method = value.upper()
            i += 2
        elif arg.startswith('-X') and len(arg) > 2:
            method = arg[2:].upper()
            i += 1
        elif arg in URL_FLAGS and value is not None:
            url = value
            i += 2
        elif arg in HEADER_FLAGS and value is not None:
            if ':' in value:
                key, header_value = value.split(':', 1)
                headers[key.strip().lower()] = header_value.strip()
            i += 2
        elif arg in DATA_FLAGS and value is not None:
            data = value
            i += 2
        elif arg in VALUE_FLAGS:
            i += 2
        elif not arg.startswith('-') and url is None:
            url = arg
            i += 1
        else:
            i += 1

    if not url:
        raise CurlParseError("Could not extract URL from cURL command")

    if not url.startswith(('http://', 'https://')):
        url = 'https://' + url

    parsed = urlparse(url)
    return CurlRequest(
        # curl switches to POST when data is sent without -X
        method=method or ('POST' if data is not None else 'GET'),
        url=url,
        path=parsed.path or '/',
        headers=headers,
        data=data,
        query_params=dict(parse_qsl(parsed.query, keep_blank_values=True))
    )


def default_status(method: str) -> int:
    """Status code a generated definition declares for a method."""
    return 201 if method.upper() == 'POST' else 200


def basic_mock_response(request: CurlRequest) -> Dict[str, Any]:
    """
    Build a plausible response body without contacting the real server.

    Args:
        request: Parsed curl request

    Returns:
        Response body for the generated definition
    """
    now = datetime.now().isoformat()
    path = request.path

    request_body: Dict[str, Any] = {}
    if request.data:
        parsed = safe_json_parse(request.data)
        request_body = parsed if isinstance(parsed, dict) else {'data': request.data}

    method = request.method.upper()

    if method == 'GET':
        if ':id' in path or TRAILING_ID.search(path):
            resource_id = ':id' if ':id' in path else '1'
            return {
                'id': resource_id,
                'name': f'Resource {resource_id}',
                'createdAt': now,
                'updatedAt': now
            }
        return {
            'data': [
                {'id': str(n), 'name': f'Resource {n}', 'createdAt': now, 'updatedAt': now}
                for n in (1, 2)
            ],
            'pagination': {'page': 1, 'limit': 10, 'total': 2}
        }

    if method == 'POST':
        return {
            'id': 'new-resource-id',
            **request_body,
            'message': 'Resource created successfully',
            'createdAt': now,
            'updatedAt': now
        }

    if method in ('PUT', 'PATCH'):
        return {
            'id': ':id' if ':id' in path else '1',
            **request_body,
            'message': 'Resource updated successfully',
            'updatedAt': now
        }

    if method == 'DELETE':
        return {
            'message': 'Resource deleted successfully',
            'deletedAt': now
        }

    return {'message': 'Success', 'timestamp': now}


def split_route(path: str) -> Tuple[str, str]:
    """
    Split a URL path into a definition file stem and a declared path.

    '{name}' segments are rewritten as ':name'; '.' and '..' segments are
    dropped so the file always lands inside the mock directory.

    Example:
        split_route('/api/users/{id}/posts')  # ('api/users', '/:id/posts')
        split_route('/')                      # ('index', '/')
    """
    segments = []
    for segment in path.split('/'):
        if segment in ('', '.', '..'):
            continue
        brace = BRACE_PARAM.match(segment)
        segments.append(f':{brace.group(1)}' if brace else segment)

    literal = []
    for segment in segments:
        if COLON_PARAM.match(segment):
            break
        literal.append(segment)

    rest = segments[len(literal):]
    stem = '/'.join(literal) or 'index'
    return stem, '/' + '/'.join(rest)


def mock_file_path(request: CurlRequest, output_dir: Union[str, Path]) -> Path:
    """YAML file a generated definition is written to."""
    stem, _ = split_route(request.path)
    return Path(output_dir) / f'{stem}.yaml'


def write_mock_file(file_path: Union[str, Path], endpoints: List[Dict[str, Any]]) -> Path:
    """
    Write definitions to a YAML file, merging with what is already there.

    Existing definitions with the same method and path are replaced; others
    are kept. An unreadable or non-list file is overwritten.

    Args:
        file_path: Target YAML file (parent directories are created)
        endpoints: Definitions to add

    Returns:
        Path of the written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    existing: List[Dict[str, Any]] = []
    if file_path.exists():
        try:
            loaded = yaml.safe_load(file_path.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning(f"Replacing unreadable mock file {file_path}: {e}")
            loaded = None
        if isinstance(loaded, list):
            existing = loaded

    merged = list(existing)
    for endpoint in endpoints:
        for index, current in enumerate(merged):
            if (isinstance(current, dict)
                    and current.get('method') == endpoint['method']
                    and current.get('path') == endpoint['path']):
                merged[index] = endpoint
                break
        else:
            merged.append(endpoint)

    file_path.write_text(
        yaml.safe_dump(merged, sort_keys=False, allow_unicode=True, default_flow_style=False),
        encoding='utf-8'
    )
    return file_path


def execute_request(request: CurlRequest, timeout: int = EXECUTE_TIMEOUT) -> Optional[Any]:
    """
    Send the request to the real server and return its response body.

    Args:
        request: Parsed curl request
        timeout: Request timeout in seconds

    Returns:
        Parsed JSON body, raw text for non-JSON bodies, or None on failure or
        an empty response
    """
    try:
        response = requests.request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            data=request.data.encode('utf-8') if request.data else None,
            timeout=timeout
        )
    except requests.RequestException as e:
        logger.warning(f"cURL execution failed: {e}")
        return None

    text = response.text.strip()
    if not text:
        logger.warning("cURL returned empty response")
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def generate_mock_from_curl(
    curl_command: str,
    output_dir: Union[str, Path] = 'mock_server',
    execute: bool = False
) -> Tuple[Path, Dict[str, Any]]:
    """
    Generate a mock definition from a curl command and write it.

    Args:
        curl_command: curl command line
        output_dir: Mock directory to write into
        execute: Send the request and use the real response body

    Returns:
        (written file, generated definition)

    Raises:
        CurlParseError: If the command can't be parsed or uses an
            unsupported method
    """
    request = parse_curl_command(curl_command)
    if HttpMethod.parse(request.method) is None:
        raise CurlParseError(f"Unsupported method {request.method}")

    body = execute_request(request) if execute else None
    if body is None:
        body = basic_mock_response(request)

    _, declared_path = split_route(request.path)
    definition = {
        'method': request.method,
        'path': declared_path,
        'status': default_status(request.method),
        'body': body,
        'delayMs': random.randint(*DELAY_RANGE)
    }

    file_path = write_mock_file(mock_file_path(request, output_dir), [definition])
    logger.info(f"Wrote {request.method} {request.path} to {file_path}")
    return file_path, definition
