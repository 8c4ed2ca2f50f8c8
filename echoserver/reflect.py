from __future__ import annotations

import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from starlette.requests import Request

from .models import EchoDocument
from .utils import canonical_header_key


# === Helpers ===


def split_env_var(entry: str) -> List[str]:
    """Split ``KEY=VALUE`` at the first ``=``; an entry without one stays whole."""
    key, sep, value = entry.partition("=")
    if not sep:
        return [entry]
    return [key, value]


def environment_entries() -> List[str]:
    return [f"{key}={value}" for key, value in os.environ.items()]


def snapshot_environment(entries: Optional[Iterable[str]] = None) -> Dict[str, Optional[str]]:
    if entries is None:
        entries = environment_entries()
    env_vars: Dict[str, Optional[str]] = {}
    for entry in entries:
        parts = split_env_var(entry)
        env_vars[parts[0]] = parts[1] if len(parts) == 2 else None
    return env_vars


def first_values(items: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Keep the first value seen for each query key, dropping the rest."""
    arguments: Dict[str, str] = {}
    for key, value in items:
        arguments.setdefault(key, value)
    return arguments


def header_multimap(raw: Sequence[Tuple[bytes, bytes]]) -> Dict[str, List[str]]:
    headers: Dict[str, List[str]] = {}
    for name, value in raw:
        key = canonical_header_key(name.decode("latin-1"))
        headers.setdefault(key, []).append(value.decode("latin-1"))
    return headers


def peer_address(request: Request) -> str:
    client = request.client
    if client is None:
        return ""
    return f"{client.host}:{client.port}"


def request_target(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


# === Echo document ===


def build_echo_document(request: Request, body: bytes, expose_environment: bool = True) -> EchoDocument:
    return EchoDocument(
        headers=header_multimap(request.headers.raw),
        path=request.url.path,
        arguments=first_values(request.query_params.multi_items()),
        method=request.method,
        origin=peer_address(request),
        url=request_target(request),
        body=body.decode("utf-8", errors="replace"),
        env_vars=snapshot_environment() if expose_environment else {},
    )
