"""
Tests for FakeEnd Markdown Documentation

Tests documentation generation including:
- Summary and table of contents
- Per-endpoint sections
- Request body templates guessed from placeholders
"""

import pytest
from datetime import datetime
from textwrap import dedent

from fakeend.common import HttpMethod
from fakeend.docs import MarkdownExporter, generate_documentation, example_value
from fakeend.loader import MockDirectoryNotFound, ResolvedEndpoint, load_endpoints


@pytest.fixture
def mock_dir(tmp_path):
    """Mock directory with two definition files."""
    (tmp_path / 'api').mkdir()
    (tmp_path / 'api' / 'products.yml').write_text(dedent("""
        - method: POST
          path: /
          status: 201
          body:
            name: "{{body.name}}"
            pricing:
              price: "{{body.price}}"
    """), encoding='utf-8')
    (tmp_path / 'users.yaml').write_text(dedent("""
        - method: GET
          path: /:id
          status: 200
          delayMs: 120
          body: {id: ":id"}
        - method: DELETE
          path: /:id
          status: 204
          body: null
    """), encoding='utf-8')
    return tmp_path


@pytest.fixture
def markdown(mock_dir):
    endpoints = load_endpoints(mock_dir).endpoints
    return MarkdownExporter.render(endpoints, mock_dir, generated_at=datetime(2024, 1, 1, 12, 0))


class TestMarkdownExporter:
    """Test MarkdownExporter.render output."""

    def test_header(self, markdown, mock_dir):
        assert markdown.startswith("# API Documentation")
        assert f"`{mock_dir}`" in markdown
        assert "Generated on: 2024-01-01T12:00:00" in markdown

    def test_summary(self, markdown):
        assert "- **POST /api/products/** ✅" in markdown
        assert "- **GET /users/:id** ✅" in markdown

    def test_table_of_contents(self, markdown):
        assert "- [api / products](#api-products)" in markdown
        assert "- [users](#users)" in markdown

    def test_sections_in_load_order(self, markdown):
        assert markdown.index("## api / products") < markdown.index("## users")
        assert "**Source:** `users.yaml`" in markdown

    def test_endpoint_details(self, markdown):
        assert "### GET /users/:id" in markdown
        assert "- **Status Code:** `200`" in markdown
        assert "- **Simulated Delay:** 120ms" in markdown
        assert "- `id` - Path parameter" in markdown

    def test_response_body_block(self, markdown):
        assert '"id": ":id"' in markdown

    def test_empty_body(self, markdown):
        assert "**Response:** Empty body" in markdown

    def test_request_body_template(self, markdown):
        assert "**Request Body Template:**" in markdown
        assert '"name": "John Doe"' in markdown
        assert '"price": 29.99' in markdown

    def test_no_template_for_get(self, mock_dir):
        endpoint = ResolvedEndpoint(
            method=HttpMethod.GET, path='/', status=200,
            body={'email': '{{body.email}}'}, source_id='x.yaml', full_path='/x/'
        )

        markdown = MarkdownExporter.render([endpoint], mock_dir)

        assert "Request Body Template" not in markdown


class TestHelpers:
    """Test documentation helper functions."""

    def test_section_title(self):
        assert MarkdownExporter.section_title('api/v1/products.yaml') == 'api / v1 / products'
        assert MarkdownExporter.section_title('index.yml') == 'index'

    def test_anchor(self):
        assert MarkdownExporter.anchor('api / v1 / products') == 'api-v1-products'

    def test_path_parameters(self):
        assert MarkdownExporter.path_parameters('/users/:userId/posts/:postId') == ['userId', 'postId']
        assert MarkdownExporter.path_parameters('/health') == []

    @pytest.mark.parametrize('status,emoji', [
        (200, '✅'), (201, '✅'), (301, '🔄'), (404, '❌'), (500, '🔥'), (101, '❓'),
    ])
    def test_status_emoji(self, status, emoji):
        assert MarkdownExporter.status_emoji(status) == emoji

    def test_request_body_template_nested(self):
        body = {
            'email': '{{body.email}}',
            'profile': {'fullName': '{{body.name}}'},
            'static': 'value',
        }

        template = MarkdownExporter.request_body_template(body)

        assert template == {'email': 'user@example.com', 'profile': {'name': 'John Doe'}}

    def test_request_body_template_none(self):
        assert MarkdownExporter.request_body_template({'a': 'b'}) is None
        assert MarkdownExporter.request_body_template(['{{body.a}}']) is None

    @pytest.mark.parametrize('name,value', [
        ('email', 'user@example.com'),
        ('unit_price', 29.99),
        ('userId', 'unique-id'),
        ('homepageUrl', 'https://example.com'),
        ('anything', 'string value'),
    ])
    def test_example_value(self, name, value):
        assert example_value(name) == value


class TestGenerateDocumentation:
    """Test generate_documentation function."""

    def test_writes_file(self, mock_dir, tmp_path):
        output = tmp_path / 'out' / 'API.md'
        output.parent.mkdir()

        written = generate_documentation(mock_dir, output)

        assert written == output
        assert "## users" in output.read_text(encoding='utf-8')

    def test_no_endpoints(self, tmp_path):
        empty = tmp_path / 'empty'
        empty.mkdir()

        assert generate_documentation(empty, tmp_path / 'API.md') is None
        assert not (tmp_path / 'API.md').exists()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(MockDirectoryNotFound):
            generate_documentation(tmp_path / 'missing', tmp_path / 'API.md')
