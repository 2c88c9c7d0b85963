"""
FakeEnd - mock backend APIs from YAML files

Describe endpoints in a directory of YAML files and serve them over HTTP,
with path, query and body values substituted into the responses.
"""

__version__ = '1.0.0'
