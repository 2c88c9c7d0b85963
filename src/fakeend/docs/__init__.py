"""
FakeEnd Documentation Module

Markdown documentation generated from mock endpoint definitions.
"""

from .markdown import MarkdownExporter, generate_documentation, example_value

__all__ = [
    'MarkdownExporter',
    'generate_documentation',
    'example_value',
]
