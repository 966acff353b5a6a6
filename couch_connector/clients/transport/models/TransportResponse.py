"""Backend-independent HTTP response model."""

from pydantic import BaseModel


class TransportResponse(BaseModel):
    """
    Represents the raw answer of a transport to a single request. The body is never decoded by the transport.
    """
    status: int
    message: str = ""
    raw_body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300
