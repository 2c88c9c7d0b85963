"""
FakeEnd Definition Loader

Scans a mock directory for YAML definition files and flattens them into an
ordered list of resolved endpoints.

A file's position under the root becomes its URL prefix:
- users.yaml            -> /users
- api/v1/products.yml   -> /api/v1/products
- index.yaml            -> (root)
- api/index.yaml        -> /api
"""

import logging
from pathlib import Path
from typing import List, Union

import yaml

from ..common import collapse_slashes
from .models import ResolvedEndpoint, LoadDiagnostic, LoadResult, validate_declaration

DEFINITION_EXTENSIONS = ('.yaml', '.yml')
INDEX_NAME = 'index'

logger = logging.getLogger("fakeend.loader")


class MockDirectoryNotFound(FileNotFoundError):
    """Raised when the mock root directory does not exist."""


def strip_extension(relative_path: str) -> str:
    """Remove a trailing .yaml/.yml extension from a relative path."""
    for extension in DEFINITION_EXTENSIONS:
        if relative_path.endswith(extension):
            return relative_path[:-len(extension)]
    return relative_path


def route_prefix(relative_path: str) -> str:
    """
    Compute the URL prefix for a definition file.

    Args:
        relative_path: File path relative to the mock root, '/' separated

    Returns:
        Prefix such as '/api/v1/products', or '' for root index files
    """
    parts = strip_extension(relative_path).split('/')
    if parts[-1] == INDEX_NAME:
        parts = parts[:-1]
    if not parts:
        return ''
    return '/' + '/'.join(parts)


class DefinitionLoader:
    """
    Loader for a directory tree of mock endpoint definitions.

    Every .yaml/.yml file must contain a list of endpoint declarations.
    Broken files and invalid declarations are skipped and reported as
    diagnostics; they never stop the load.

    Example:
        loader = DefinitionLoader("mock_server")
        result = loader.load()

        for endpoint in result.endpoints:
            print(endpoint.method, endpoint.full_path)
    """

    def __init__(self, root: Union[str, Path]):
        """
        Initialize definition loader.

        Args:
            root: Mock root directory
        """
        self.root = Path(root)

    def discover(self) -> List[Path]:
        """
        Find definition files under the root, in lexical relative-path order.

        Raises:
            MockDirectoryNotFound: If the root directory doesn't exist
        """
        if not self.root.is_dir():
            raise MockDirectoryNotFound(f"Mock directory not found: {self.root}")

        files = [
            p for p in self.root.rglob('*')
            if p.suffix in DEFINITION_EXTENSIONS and p.is_file()
        ]
        return sorted(files, key=lambda p: p.relative_to(self.root).as_posix())

    def load(self) -> LoadResult:
        """
        Load and resolve all endpoint declarations.

        Returns:
            LoadResult with endpoints in file-then-declaration order

        Raises:
            MockDirectoryNotFound: If the root directory doesn't exist
        """
        result = LoadResult()

        for file_path in self.discover():
            source_id = file_path.relative_to(self.root).as_posix()
            result.files.append(source_id)
            self._load_file(file_path, source_id, result)

        logger.info(
            f"Loaded {len(result.endpoints)} endpoints from {len(result.files)} files "
            f"in {self.root} ({len(result.diagnostics)} skipped)"
        )
        return result

    def _load_file(self, file_path: Path, source_id: str, result: LoadResult):
        """Parse one definition file and append its valid endpoints."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                declarations = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            self._skip(result, LoadDiagnostic(source_id, f"could not be loaded: {e}", kind='file'))
            return

        if not isinstance(declarations, list):
            found = type(declarations).__name__ if declarations is not None else 'nothing'
            self._skip(result, LoadDiagnostic(
                source_id,
                f"does not contain a list of endpoints (found {found})",
                kind='file'
            ))
            return

        prefix = route_prefix(source_id)

        for index, declaration in enumerate(declarations):
            method, reason = validate_declaration(declaration)
            if method is None:
                self._skip(result, LoadDiagnostic(source_id, f"invalid endpoint: {reason}", index=index))
                continue

            result.endpoints.append(ResolvedEndpoint(
                method=method,
                path=declaration['path'],
                status=declaration['status'],
                body=declaration['body'],
                delay_ms=declaration.get('delayMs') or 0,
                source_id=source_id,
                full_path=collapse_slashes(prefix + declaration['path']),
                file_path=file_path.resolve(),
            ))

    @staticmethod
    def _skip(result: LoadResult, diagnostic: LoadDiagnostic):
        result.diagnostics.append(diagnostic)
        logger.warning(f"Skipping {diagnostic}")


def load_endpoints(root: Union[str, Path]) -> LoadResult:
    """
    Convenience function to load a mock directory in one call.

    Example:
        result = load_endpoints("mock_server")
    """
    return DefinitionLoader(root).load()
