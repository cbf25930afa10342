"""
Client code generation for recorded requests.

Produces copy-pasteable code that repeats a request outside the tool:
a JavaScript fetch call or a curl command.
"""

import json
import shlex
from collections.abc import Iterable

from ..schemas.execute import HeaderPair
from .normalizer import header_mapping


def _indent(text: str, prefix: str) -> str:
    lines = text.splitlines()
    return "\n".join([lines[0]] + [prefix + line for line in lines[1:]])


def build_fetch_snippet(
    method: str,
    url: str,
    headers: Iterable[HeaderPair],
    body: str | None
) -> str:
    """
    Render a JavaScript fetch call for the request.

    The body is included only for non-GET requests with content. A JSON body
    is pretty-printed inside JSON.stringify(); anything else is embedded as a
    string literal.
    """
    lines = [
        f"fetch({json.dumps(url)}, {{",
        f"  method: {json.dumps(method)},",
        f"  headers: {_indent(json.dumps(header_mapping(headers), indent=2), '  ')},",
    ]
    if method != "GET" and body:
        try:
            parsed = json.loads(body)
        except ValueError:
            lines.append(f"  body: {json.dumps(body)},")
        else:
            lines.append(f"  body: JSON.stringify({_indent(json.dumps(parsed, indent=2), '  ')}),")
    lines.extend([
        "})",
        "  .then(res => res.json())",
        "  .then(data => console.log(data))",
        "  .catch(err => console.error(err));",
    ])
    return "\n".join(lines)


def build_curl_snippet(
    method: str,
    url: str,
    headers: Iterable[HeaderPair],
    body: str | None
) -> str:
    """Render a curl command line for the request."""
    parts = [f"curl -X {method} {shlex.quote(url)}"]
    for pair in headers:
        parts.append(f"-H {shlex.quote(f'{pair.key}: {pair.value}')}")
    if method != "GET" and body:
        parts.append(f"--data-raw {shlex.quote(body)}")
    return " \\\n  ".join(parts)
