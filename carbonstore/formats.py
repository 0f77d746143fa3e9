"""Response formats understood by the query server."""

from __future__ import annotations

import enum


class ResponseFormat(enum.IntEnum):
    """Encoding of a server response."""

    JSON = 0
    PICKLE = 1
    PROTO_V2 = 2
    PROTO_V3 = 3

    def __str__(self) -> str:
        return _NAMES[self]


_NAMES = {
    ResponseFormat.JSON: "json",
    ResponseFormat.PICKLE: "pickle",
    ResponseFormat.PROTO_V2: "carbonapi_v2_pb",
    ResponseFormat.PROTO_V3: "carbonapi_v3_pb",
}

KNOWN_FORMATS: dict[str, ResponseFormat] = {
    "json": ResponseFormat.JSON,
    "pickle": ResponseFormat.PICKLE,
    "protobuf": ResponseFormat.PROTO_V2,
    "protobuf3": ResponseFormat.PROTO_V2,
    "carbonapi_v2_pb": ResponseFormat.PROTO_V2,
    "carbonapi_v3_pb": ResponseFormat.PROTO_V3,
}


def lookup_format(name: str) -> ResponseFormat:
    """Return the format a request parameter names; raise ValueError if unknown."""
    try:
        return KNOWN_FORMATS[name]
    except KeyError:
        raise ValueError("Unknown format") from None