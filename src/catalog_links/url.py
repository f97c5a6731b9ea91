#!filepath: src/catalog_links/url.py
from __future__ import annotations

from typing import Any, List, Mapping, Tuple
from urllib.parse import urlencode

from catalog_links.models import LinkRequest


def implode_arguments(namespace: str, arguments: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Flatten arguments into ``namespace[key]`` query pairs.

    Nested mappings become ``namespace[key][sub]``, None values are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in arguments.items():
        name = f"{namespace}[{key}]" if namespace else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(implode_arguments(name, value))
        elif isinstance(value, bool):
            pairs.append((name, "1" if value else "0"))
        else:
            pairs.append((name, str(value)))
    return pairs


class QueryStringRenderer:
    """Standalone renderer producing ``/index.php?id=...`` links.

    Host frameworks plug in their own renderer, this one serves the CLI and
    tests.

    Args:
        base_url: Prefix used for absolute links.
        script: Entry script path.
    """

    def __init__(self, base_url: str = "", script: str = "/index.php") -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._script = script

    def __call__(self, request: LinkRequest) -> str:
        pairs: List[Tuple[str, str]] = [("id", str(int(request.page_uid)))]
        if request.language_uid:
            pairs.append(("L", str(int(request.language_uid))))
        pairs.extend(implode_arguments(request.namespace, request.arguments))
        path = f"{self._script}?{urlencode(pairs)}"
        if request.absolute and self._base_url:
            return f"{self._base_url}{path}"
        return path
