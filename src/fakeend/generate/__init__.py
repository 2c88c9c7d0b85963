"""
FakeEnd Generator Module

Creates YAML mock definitions from curl commands.
"""

from .curl import (
    CurlRequest,
    CurlParseError,
    parse_curl_command,
    basic_mock_response,
    default_status,
    split_route,
    mock_file_path,
    write_mock_file,
    execute_request,
    generate_mock_from_curl,
)

__all__ = [
    'CurlRequest',
    'CurlParseError',
    'parse_curl_command',
    'basic_mock_response',
    'default_status',
    'split_route',
    'mock_file_path',
    'write_mock_file',
    'execute_request',
    'generate_mock_from_curl',
]
