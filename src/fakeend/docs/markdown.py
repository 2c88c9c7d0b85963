"""
Markdown documentation for FakeEnd mock endpoints.

Turns the resolved endpoint list into a single markdown document with a
summary, a table of contents (one section per definition file) and a
description of every endpoint.
"""

import json
import re
from collections import OrderedDict
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from ..common import BODY_METHODS
from ..common.utils import (
    HTTP_STATUS_2XX_MIN, HTTP_STATUS_3XX_MIN, HTTP_STATUS_4XX_MIN,
    HTTP_STATUS_5XX_MIN, HTTP_STATUS_5XX_MAX
)
from ..loader import ResolvedEndpoint, load_endpoints, strip_extension

PATH_PARAM = re.compile(r':(\w+)')
BODY_FIELD = re.compile(r'\{\{body\.(\w+)\}\}')

# Example values for request body templates, first substring match wins
EXAMPLE_VALUES = [
    ('email', 'user@example.com'),
    ('name', 'John Doe'),
    ('price', 29.99),
    ('category', 'Category Name'),
    ('description', 'Description text'),
    ('id', 'unique-id'),
    ('phone', '+1234567890'),
    ('address', '123 Main St'),
    ('city', 'New York'),
    ('country', 'USA'),
    ('date', '2024-01-01'),
    ('url', 'https://example.com'),
]
DEFAULT_EXAMPLE = 'string value'


class MarkdownExporter:
    """
    Exports resolved endpoints to markdown documentation.
    """

    @staticmethod
    def render(
        endpoints: List[ResolvedEndpoint],
        mock_dir: Union[str, Path],
        generated_at: Optional[datetime] = None
    ) -> str:
        """
        Render endpoints as a markdown document.

        Args:
            endpoints: Resolved endpoints, in load order
            mock_dir: Directory the endpoints were loaded from (shown in header)
            generated_at: Timestamp to print (default: now)

        Returns:
            Markdown text
        """
        generated_at = generated_at or datetime.now()

        lines = [
            "# API Documentation",
            "",
            f"This documentation was automatically generated from mock endpoint definitions in `{mock_dir}`.",
            "",
            f"Generated on: {generated_at.isoformat()}",
            "",
            "## API Endpoints Summary",
            "",
        ]
        for endpoint in endpoints:
            lines.append(
                f"- **{endpoint.method.value} {endpoint.full_path}** "
                f"{MarkdownExporter.status_emoji(endpoint.status)}"
            )
        lines += ["", "---", "", "## Table of Contents", ""]

        groups = MarkdownExporter._group_by_source(endpoints)
        for source_id in groups:
            title = MarkdownExporter.section_title(source_id)
            lines.append(f"- [{title}](#{MarkdownExporter.anchor(title)})")
        lines += ["", "---", ""]

        for source_id, file_endpoints in groups.items():
            lines.append(f"## {MarkdownExporter.section_title(source_id)}")
            lines.append("")
            lines.append(f"**Source:** `{source_id}`")
            lines.append("")
            for endpoint in file_endpoints:
                lines.extend(MarkdownExporter._endpoint_section(endpoint))
            lines += ["---", ""]

        return "\n".join(lines)

    @staticmethod
    def _group_by_source(endpoints: List[ResolvedEndpoint]) -> Dict[str, List[ResolvedEndpoint]]:
        """Group endpoints by definition file, keeping first-seen order."""
        groups: Dict[str, List[ResolvedEndpoint]] = OrderedDict()
        for endpoint in endpoints:
            groups.setdefault(endpoint.source_id, []).append(endpoint)
        return groups

    @staticmethod
    def _endpoint_section(endpoint: ResolvedEndpoint) -> List[str]:
        """Markdown lines for a single endpoint."""
        method = endpoint.method.value
        lines = [
            f"### {method} {endpoint.full_path}",
            "",
            f"- **Method:** `{method}`",
            f"- **Path:** `{endpoint.full_path}`",
            f"- **Status Code:** `{endpoint.status}`",
        ]
        if endpoint.delay_ms:
            lines.append(f"- **Simulated Delay:** {endpoint.delay_ms}ms")
        lines.append("")

        params = MarkdownExporter.path_parameters(endpoint.full_path)
        if params:
            lines += ["**Path Parameters:**", ""]
            lines += [f"- `{param}` - Path parameter" for param in params]
            lines.append("")

        if endpoint.body is not None:
            lines += ["**Response Body:**", "", "```json", _to_json(endpoint.body), "```", ""]
        else:
            lines += ["**Response:** Empty body", ""]

        if endpoint.method in BODY_METHODS:
            template = MarkdownExporter.request_body_template(endpoint.body)
            if template:
                lines += ["**Request Body Template:**", "", "```json", _to_json(template), "```", ""]

        return lines

    @staticmethod
    def section_title(source_id: str) -> str:
        """Section name for a definition file: 'api/v1/products.yaml' -> 'api / v1 / products'."""
        return strip_extension(source_id).replace('/', ' / ')

    @staticmethod
    def anchor(title: str) -> str:
        """Markdown anchor for a section title."""
        return re.sub(r'[^a-z0-9]+', '-', title.lower())

    @staticmethod
    def path_parameters(path: str) -> List[str]:
        """Names of :param segments in a route pattern."""
        return PATH_PARAM.findall(path)

    @staticmethod
    def status_emoji(status: int) -> str:
        if HTTP_STATUS_2XX_MIN <= status < HTTP_STATUS_3XX_MIN:
            return '✅'
        if HTTP_STATUS_3XX_MIN <= status < HTTP_STATUS_4XX_MIN:
            return '🔄'
        if HTTP_STATUS_4XX_MIN <= status < HTTP_STATUS_5XX_MIN:
            return '❌'
        if HTTP_STATUS_5XX_MIN <= status < HTTP_STATUS_5XX_MAX:
            return '🔥'
        return '❓'

    @staticmethod
    def request_body_template(body: Any) -> Optional[Dict[str, Any]]:
        """
        Guess a request body from {{body.field}} placeholders in a response body.

        Nested mappings in the response produce nested mappings in the
        template; lists are not searched.

        Returns:
            Template dictionary, or None if no placeholders were found
        """
        if not isinstance(body, dict):
            return None

        def collect(source: Dict[str, Any], target: Dict[str, Any]):
            for key, value in source.items():
                if isinstance(value, str):
                    field = BODY_FIELD.search(value)
                    if field:
                        target[field.group(1)] = example_value(key)
                elif isinstance(value, dict):
                    nested: Dict[str, Any] = {}
                    collect(value, nested)
                    if nested:
                        target[key] = nested

        template: Dict[str, Any] = {}
        collect(body, template)
        return template or None


def example_value(field_name: str) -> Any:
    """Plausible example value for a field, guessed from its name."""
    lower = field_name.lower()
    for hint, value in EXAMPLE_VALUES:
        if hint in lower:
            return value
    return DEFAULT_EXAMPLE


def _to_json(value: Any) -> str:
    # default=str covers YAML dates
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def generate_documentation(
    mock_dir: Union[str, Path],
    output: Union[str, Path] = 'api-documentation.md'
) -> Optional[Path]:
    """
    Load a mock directory and write its markdown documentation.

    Args:
        mock_dir: Directory containing YAML definitions
        output: Markdown file to write

    Returns:
        Path of the written file, or None if no endpoints were found

    Raises:
        MockDirectoryNotFound: If mock_dir doesn't exist
    """
    result = load_endpoints(mock_dir)
    if not result.endpoints:
        return None

    output_path = Path(output)
    output_path.write_text(MarkdownExporter.render(result.endpoints, mock_dir), encoding='utf-8')
    return output_path
