"""
Pydantic schemas for request execution.

Defines the request descriptor submitted by the client, the normalized
request handed to the executor, the tagged response body and the
execution result returned to the client.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import CamelModel


# HTTP methods supported by the executor
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")


class HeaderPair(BaseModel):
    """A single header entry. Keys keep their original case."""
    key: str
    value: str

    model_config = ConfigDict(frozen=True)


class RequestDescriptor(BaseModel):
    """
    Request as authored by the user.

    Headers may be an ordered list of {key, value} pairs or a mapping.
    The body is raw text; a JSON object or array is also accepted and
    serialized by the normalizer.
    """
    url: str
    method: HttpMethod = "GET"
    headers: list[HeaderPair] | dict[str, str] = []
    body: str | dict[str, Any] | list[Any] | None = None

    @field_validator("method", mode="before")
    @classmethod
    def uppercase_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class PreparedRequest(BaseModel):
    """Normalized request ready for transmission."""
    method: HttpMethod
    url: str
    headers: tuple[HeaderPair, ...] = ()
    body: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def header_mapping(self) -> dict[str, str]:
        """Headers folded in order; later duplicates overwrite earlier ones."""
        return {pair.key: pair.value for pair in self.headers}


class JsonBody(BaseModel):
    """Response body that parsed as JSON."""
    kind: Literal["json"] = "json"
    value: Any

    model_config = ConfigDict(frozen=True)


class RawBody(BaseModel):
    """Response body kept as text because it is not valid JSON."""
    kind: Literal["raw"] = "raw"
    text: str

    model_config = ConfigDict(frozen=True)


ResponseBody = Annotated[Union[JsonBody, RawBody], Field(discriminator="kind")]


class ExecutionResult(BaseModel):
    """Outcome of one completed outbound call, whatever its HTTP status."""
    status: int
    status_text: str = "Unknown"
    headers: dict[str, str] = {}
    body: ResponseBody
    timing_ms: int
    size_bytes: int

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


def body_to_wire(body: JsonBody | RawBody) -> tuple[Any, str]:
    """Flatten a tagged body into (value, body_type) for JSON responses."""
    if isinstance(body, JsonBody):
        return body.value, "json"
    return body.text, "raw"


class RequestSnapshot(CamelModel):
    """The request as it was transmitted."""
    url: str
    method: HttpMethod
    headers: list[HeaderPair]
    body: str | None = None

    @classmethod
    def from_prepared(cls, prepared: PreparedRequest) -> "RequestSnapshot":
        return cls(
            url=prepared.url,
            method=prepared.method,
            headers=list(prepared.headers),
            body=prepared.body
        )


class ResponseSnapshot(CamelModel):
    """The response as shown to the user."""
    status: int
    status_text: str
    headers: dict[str, str]
    body: Any = None
    body_type: Literal["json", "raw"]
    timing: int | None = None
    size: int | None = None

    @classmethod
    def from_result(cls, result: ExecutionResult) -> "ResponseSnapshot":
        value, body_type = body_to_wire(result.body)
        return cls(
            status=result.status,
            status_text=result.status_text,
            headers=result.headers,
            body=value,
            body_type=body_type,
            timing=result.timing_ms,
            size=result.size_bytes
        )


class ExecuteResponse(CamelModel):
    """
    Response of POST /api/request.

    saved_to_history is False when the execution succeeded but the history
    write failed; the result is returned either way.
    """
    request: RequestSnapshot
    response: ResponseSnapshot
    saved_to_history: bool
    history_id: str | None = None
