from enum import Enum

from fastapi import status


class MetadataErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    TRANSPORT_FAILURE = "transport_failure"
    REMOTE_HTTP_ERROR = "remote_http_error"
    BODY_READ_FAILURE = "body_read_failure"
    PARSE_FAILURE = "parse_failure"


class MetadataError(Exception):
    """Fatal failure of a metadata extraction run."""

    kind: MetadataErrorKind
    http_status: int = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"detail": self.message, "kind": self.kind.value}


class InvalidInputError(MetadataError):
    kind = MetadataErrorKind.INVALID_INPUT
    http_status = status.HTTP_400_BAD_REQUEST


class TransportFailureError(MetadataError):
    kind = MetadataErrorKind.TRANSPORT_FAILURE


class RemoteHttpError(MetadataError):
    kind = MetadataErrorKind.REMOTE_HTTP_ERROR

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
        # Surface the remote failure status as-is when it is an error status.
        if 400 <= status_code < 600:
            self.http_status = status_code

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class BodyReadError(MetadataError):
    kind = MetadataErrorKind.BODY_READ_FAILURE


class ParseFailureError(MetadataError):
    kind = MetadataErrorKind.PARSE_FAILURE
    http_status = 422
