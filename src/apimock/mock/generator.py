"""
apimock Response Generator

Turns the contents of a mock file into a response description.

Features:
- Descriptor parsing (method, status, delay, headers, body)
- Simple mode: plain JSON that is not a descriptor is served verbatim
- {path.N} placeholder substitution in header values and body text
- Status defaulting (200, or 204 for an empty body)
"""

import json
import re
from dataclasses import dataclass, field
from typing import List, Dict, Any, Union

PLACEHOLDER_PATTERN = re.compile(r'\{path\.([0-9]+)\}')

DESCRIPTOR_KEYS = ('method', 'status', 'delay', 'headers', 'body')

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'
RAW_CONTENT_TYPE = 'application/json'


class DescriptorError(ValueError):
    """Raised when mock file content does not fit the descriptor schema."""


def expand_placeholders(text: str, params: List[str]) -> str:
    """
    Replace {path.N} tokens with captured path values.

    Tokens whose index is out of range are left as they are.

    Args:
        text: Header value or serialized body
        params: Values captured by wildcard segments, in template order

    Returns:
        Text with resolvable tokens substituted

    Example:
        expand_placeholders('{"id": "{path.0}"}', ['42'])  # '{"id": "42"}'
    """
    def substitute(match):
        index = int(match.group(1))
        if index < len(params):
            return params[index]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, text)


@dataclass
class OpaqueJSON:
    """Mock file content served as-is (simple mode)."""

    raw: bytes


@dataclass
class MockDescriptor:
    """Structured mock response parsed from a descriptor file."""

    methods: List[str] = field(default_factory=list)
    status: int = 0
    delay_ms: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    has_body: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockDescriptor':
        """
        Create descriptor from a decoded JSON object.

        Raises:
            DescriptorError: If a recognized key holds a value of the wrong type
        """
        methods = data.get('method')
        if methods is None:
            methods = []
        if not isinstance(methods, list) or not all(isinstance(m, str) for m in methods):
            raise DescriptorError("'method' must be a list of strings")

        status = data.get('status')
        if status is None:
            status = 0
        if not _is_int(status):
            raise DescriptorError("'status' must be an integer")
        if status != 0 and not 100 <= status <= 599:
            raise DescriptorError(f"'status' {status} is not a valid HTTP status code")

        delay = data.get('delay')
        if delay is None:
            delay = 0
        if not _is_int(delay):
            raise DescriptorError("'delay' must be an integer number of milliseconds")

        headers = data.get('headers')
        if headers is None:
            headers = {}
        if not isinstance(headers, dict) or not all(isinstance(v, str) for v in headers.values()):
            raise DescriptorError("'headers' must be an object of string values")

        return cls(
            methods=list(methods),
            status=status,
            delay_ms=max(delay, 0),
            headers=dict(headers),
            body=data.get('body'),
            has_body=data.get('body') is not None
        )

    def allows(self, method: str) -> bool:
        """Check whether the request method is permitted (empty list allows all)."""
        # Method names are case-sensitive
        if not self.methods:
            return True
        return method in self.methods

    def render(self, params: List[str]) -> Dict[str, Any]:
        """
        Render descriptor with captured path values.

        Args:
            params: Values captured by wildcard segments

        Returns:
            Response dict with status, headers and body bytes
        """
        rendered_headers = {
            name: expand_placeholders(value, params)
            for name, value in self.headers.items()
        }

        status = self.status or 200

        if not self.has_body or not _allows_body(status):
            if status == 200:
                status = 204
            return {
                'status': status,
                'resp_headers': rendered_headers,
                'resp_body': b'',
                'content_type': None
            }

        body_text = json.dumps(self.body, separators=(',', ':'), ensure_ascii=False)
        return {
            'status': status,
            'resp_headers': rendered_headers,
            'resp_body': expand_placeholders(body_text, params).encode('utf-8'),
            'content_type': JSON_CONTENT_TYPE
        }


DescriptorBody = Union[MockDescriptor, OpaqueJSON]


def parse_mock_file(raw: bytes) -> DescriptorBody:
    """
    Parse mock file content.

    Content is a descriptor when it is a JSON object carrying at least one of
    the descriptor keys with correctly typed values. Anything else (invalid
    JSON, arrays, plain data objects) is returned as OpaqueJSON.

    Args:
        raw: File bytes

    Returns:
        MockDescriptor or OpaqueJSON
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return OpaqueJSON(raw=raw)

    if not isinstance(data, dict) or not any(key in data for key in DESCRIPTOR_KEYS):
        return OpaqueJSON(raw=raw)

    try:
        return MockDescriptor.from_dict(data)
    except DescriptorError:
        return OpaqueJSON(raw=raw)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _allows_body(status: int) -> bool:
    # 1xx, 204 and 304 responses never carry a body on the wire
    return status >= 200 and status not in (204, 304)
