"""QuestDB sink writing InfluxDB line protocol over HTTP."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math

import httpx

from flightgen.config import settings
from flightgen.errors import ConfigurationError, SinkError
from flightgen.models.telemetry import Batch, Row

logger = logging.getLogger("flightgen.sinks.questdb")

DEFAULT_HTTP_PORT = 9000
WRITE_PATH = "/write"


@dataclass
class ConnectionSettings:
    """Parsed form of a QuestDB client configuration string."""

    scheme: str
    host: str
    port: int
    username: str | None = None
    password: str | None = None
    token: str | None = None

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


def parse_connection_string(conf: str) -> ConnectionSettings:
    """Parse ``http::addr=host:port;username=...;password=...;`` style strings.

    Only the HTTP transports are supported; ``addr`` is required.
    """

    scheme, sep, rest = conf.strip().partition("::")
    if not sep:
        raise ConfigurationError(
            f"Connection string {conf!r} must look like 'http::addr=host:port;'"
        )
    scheme = scheme.lower()
    if scheme not in {"http", "https"}:
        raise ConfigurationError(
            f"Unsupported sink protocol {scheme!r}; use http or https"
        )

    params: dict[str, str] = {}
    for part in rest.split(";"):
        if not part.strip():
            continue
        key, eq, value = part.partition("=")
        if not eq:
            raise ConfigurationError(f"Malformed connection string parameter {part!r}")
        params[key.strip().lower()] = value.strip()

    addr = params.get("addr")
    if not addr:
        raise ConfigurationError("Connection string is missing 'addr'")

    host, _, raw_port = addr.rpartition(":")
    if not host:
        host, raw_port = addr, ""
    try:
        port = int(raw_port) if raw_port else DEFAULT_HTTP_PORT
    except ValueError as exc:
        raise ConfigurationError(f"Invalid port in addr {addr!r}") from exc

    return ConnectionSettings(
        scheme=scheme,
        host=host,
        port=port,
        username=params.get("username"),
        password=params.get("password"),
        token=params.get("token"),
    )


def _escape_measurement(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", "\\,").replace(" ", "\\ ")


def _escape_tag(value: str) -> str:
    return _escape_measurement(value).replace("=", "\\=")


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"Cannot encode non-finite value {value}")
    return repr(float(value))


def encode_row(table_name: str, row: Row) -> str:
    fields = ",".join(
        f"{_escape_tag(name)}={_format_float(value)}" for name, value in row.fields().items()
    )
    return (
        f"{_escape_measurement(table_name)},plane_id={_escape_tag(row.plane_id)} "
        f"{fields} {row.timestamp_ns}"
    )


def encode_batch(table_name: str, batch: Batch) -> bytes:
    """Render a batch as one line protocol payload, one row per line."""

    return ("\n".join(encode_row(table_name, row) for row in batch.rows) + "\n").encode()


class QuestDBSink:
    """Send each batch to QuestDB's ``/write`` endpoint in a single request."""

    def __init__(
        self,
        connection: ConnectionSettings,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.connection = connection
        self.timeout = timeout or settings.sink_timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_conf(cls, conf: str, **kwargs) -> "QuestDBSink":
        return cls(parse_connection_string(conf), **kwargs)

    async def __aenter__(self) -> "QuestDBSink":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.aclose()
        return False

    async def open(self) -> None:
        if self._client is not None:
            return
        headers = {"Content-Type": "text/plain; charset=utf-8"}
        auth = None
        if self.connection.token:
            headers["Authorization"] = f"Bearer {self.connection.token}"
        elif self.connection.username:
            auth = httpx.BasicAuth(self.connection.username, self.connection.password or "")
        self._client = httpx.AsyncClient(
            base_url=self.connection.base_url,
            timeout=self.timeout,
            headers=headers,
            auth=auth,
            transport=self.transport,
        )
        logger.debug("QuestDB sink ready at %s", self.connection.base_url)

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def send(self, table_name: str, batch: Batch) -> None:
        if self._client is None:
            raise SinkError("QuestDB sink is not open")

        try:
            payload = encode_batch(table_name, batch)
        except ValueError as exc:
            raise SinkError(f"Could not encode batch for plane {batch.plane_id}: {exc}") from exc

        try:
            response = await self._client.post(
                WRITE_PATH, params={"precision": "n"}, content=payload
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("QuestDB write timed out for plane %s: %s", batch.plane_id, exc)
            raise SinkError(f"QuestDB write timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "QuestDB rejected batch for plane %s: status=%s body=%s",
                batch.plane_id,
                exc.response.status_code,
                exc.response.text,
            )
            raise SinkError(
                f"QuestDB returned HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("QuestDB write failed for plane %s: %s", batch.plane_id, exc)
            raise SinkError(f"QuestDB write failed: {exc}") from exc

        logger.debug(
            "Flushed batch %s for plane %s (%s rows)", batch.number, batch.plane_id, len(batch)
        )


__all__ = [
    "ConnectionSettings",
    "QuestDBSink",
    "encode_batch",
    "encode_row",
    "parse_connection_string",
]
