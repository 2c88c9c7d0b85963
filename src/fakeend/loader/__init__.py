"""
FakeEnd Definition Loader Module

Discovers YAML endpoint definitions and resolves them into a flat routing
table.
"""

from .models import ResolvedEndpoint, LoadDiagnostic, LoadResult, validate_declaration
from .loader import (
    DefinitionLoader,
    MockDirectoryNotFound,
    load_endpoints,
    route_prefix,
    strip_extension,
    DEFINITION_EXTENSIONS,
)

__all__ = [
    'ResolvedEndpoint',
    'LoadDiagnostic',
    'LoadResult',
    'validate_declaration',
    'DefinitionLoader',
    'MockDirectoryNotFound',
    'load_endpoints',
    'route_prefix',
    'strip_extension',
    'DEFINITION_EXTENSIONS',
]
