from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PORT = "8080"
DEFAULT_DOCUMENT_ROUTE = "/swagger.json"
DEFAULT_DOCUMENT_PATHS = ("/config/swagger.json", "./swagger.json")
SERVER_NAME = "http-swagger-server"

FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ServerConfig:
    listen_address: str = ":" + DEFAULT_PORT
    document_route: str = DEFAULT_DOCUMENT_ROUTE
    document_paths: Tuple[str, ...] = DEFAULT_DOCUMENT_PATHS
    server_name: str = SERVER_NAME
    expose_environment: bool = True

    def bind(self) -> Tuple[str, int]:
        """Split the listen address into ``(host, port)`` for the listener.

        An empty host binds every interface and an empty port asks the OS
        for an ephemeral one. Raises ``ValueError`` when the port is not a
        valid TCP port number.
        """
        host, sep, port = self.listen_address.rpartition(":")
        if not sep:
            raise ValueError(f"listen address {self.listen_address!r} has no port")
        if not port:
            return host or "0.0.0.0", 0
        try:
            number = int(port)
        except ValueError:
            raise ValueError(f"invalid port {port!r} in listen address {self.listen_address!r}") from None
        if not 0 <= number <= 65535:
            raise ValueError(f"port {number} out of range in listen address {self.listen_address!r}")
        return host or "0.0.0.0", number


def resolve(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    env = os.environ if environ is None else environ

    port = env.get("HTTP_PORT")
    if port is None:
        logger.info("HTTP_PORT not defined.  Defaulting to %s", DEFAULT_PORT)
        port = DEFAULT_PORT

    route = env.get("SWAGGER_ENDPOINT")
    if route is None:
        logger.info("SWAGGER_ENDPOINT not defined.  Defaulting to %s", DEFAULT_DOCUMENT_ROUTE)
        route = DEFAULT_DOCUMENT_ROUTE

    expose = env.get("ECHO_EXPOSE_ENV", "1").strip().lower() not in FALSE_VALUES

    return ServerConfig(
        listen_address=":" + port,
        document_route=route,
        expose_environment=expose,
    )
