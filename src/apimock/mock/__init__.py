"""
apimock Mock Server Module

Serves mock API responses from a directory of JSON files.

This module provides:
- FastAPI-based mock server
- Path matcher with wildcard segments and specificity scoring
- Descriptor parsing and {path.N} placeholder expansion
"""

from .server import MockServer, MockConfig, create_mock_server
from .matcher import PathMatcher, RouteTemplate, MatchResult
from .generator import (
    MockDescriptor,
    OpaqueJSON,
    DescriptorBody,
    parse_mock_file,
    expand_placeholders
)

__all__ = [
    # Server
    'MockServer',
    'MockConfig',
    'create_mock_server',

    # Matcher
    'PathMatcher',
    'RouteTemplate',
    'MatchResult',

    # Generator
    'MockDescriptor',
    'OpaqueJSON',
    'DescriptorBody',
    'parse_mock_file',
    'expand_placeholders',
]
