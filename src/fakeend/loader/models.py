"""
FakeEnd Definition Models

Resolved endpoint records, load diagnostics and declaration validation.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple

from ..common import HttpMethod, JSONValue

REQUIRED_FIELDS = ('method', 'path', 'status', 'body')

STATUS_MIN = 100
STATUS_MAX = 599


@dataclass(frozen=True)
class ResolvedEndpoint:
    """A declaration after prefix computation, ready for routing."""

    method: HttpMethod
    path: str                   # Path as declared in the file
    status: int
    body: JSONValue             # Response template
    source_id: str              # File path relative to the mock root (POSIX)
    full_path: str              # Prefix + declared path, slashes collapsed
    delay_ms: int = 0
    file_path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (declaration field names)."""
        data = {
            'method': self.method.value,
            'path': self.path,
            'fullPath': self.full_path,
            'status': self.status,
            'body': self.body,
            'source': self.source_id,
        }
        if self.delay_ms:
            data['delayMs'] = self.delay_ms
        return data


@dataclass(frozen=True)
class LoadDiagnostic:
    """Something the loader skipped, and why."""

    source_id: str
    message: str
    kind: str = "declaration"   # file, declaration
    index: Optional[int] = None

    def __str__(self) -> str:
        if self.index is None:
            return f"{self.source_id}: {self.message}"
        return f"{self.source_id}[{self.index}]: {self.message}"


@dataclass
class LoadResult:
    """Output of a definition directory scan."""

    endpoints: List[ResolvedEndpoint] = field(default_factory=list)
    diagnostics: List[LoadDiagnostic] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def skipped_files(self) -> List[str]:
        return [d.source_id for d in self.diagnostics if d.kind == 'file']

    @property
    def invalid_declarations(self) -> int:
        return sum(1 for d in self.diagnostics if d.kind == 'declaration')


def _is_int(value: Any) -> bool:
    # bool is an int subclass; YAML `true` is not a status code
    return isinstance(value, int) and not isinstance(value, bool)


def _has_non_finite(value: Any) -> bool:
    # YAML .inf and .nan have no JSON representation
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, list):
        return any(_has_non_finite(item) for item in value)
    if isinstance(value, dict):
        return any(_has_non_finite(item) for item in value.values())
    return False


def validate_declaration(declaration: Any) -> Tuple[Optional[HttpMethod], Optional[str]]:
    """
    Validate an authored endpoint declaration.

    Args:
        declaration: One element of a definition file's top-level list

    Returns:
        (method, None) when valid, (None, reason) otherwise
    """
    if not isinstance(declaration, dict):
        return None, f"expected a mapping, got {type(declaration).__name__}"

    missing = [name for name in REQUIRED_FIELDS if name not in declaration]
    if missing:
        return None, f"missing required field(s): {', '.join(missing)}"

    method = HttpMethod.parse(declaration['method'])
    if method is None:
        return None, f"unsupported method {declaration['method']!r}"

    path = declaration['path']
    if not isinstance(path, str) or not path.startswith('/'):
        return None, f"path must be a string starting with '/', got {path!r}"

    status = declaration['status']
    if not _is_int(status) or not STATUS_MIN <= status <= STATUS_MAX:
        return None, f"status must be an integer between {STATUS_MIN} and {STATUS_MAX}, got {status!r}"

    delay = declaration.get('delayMs')
    if delay is not None and (not _is_int(delay) or delay < 0):
        return None, f"delayMs must be a non-negative integer, got {delay!r}"

    if _has_non_finite(declaration['body']):
        return None, "body contains a non-finite number (.inf or .nan), which JSON cannot represent"

    return method, None
