from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


# === Response documents ===


class StatusDocument(BaseModel):
    uptime: str


class EchoDocument(BaseModel):
    """Reflection of one request, built per request and never stored."""

    model_config = ConfigDict(frozen=True)

    headers: Dict[str, List[str]]
    path: str
    arguments: Dict[str, str]
    method: str
    origin: str
    url: str
    body: str
    # None marks an environment entry that carried no "=".
    env_vars: Dict[str, Optional[str]]
