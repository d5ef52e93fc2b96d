"""Models for normalized meal photos."""

import base64
import binascii
from dataclasses import dataclass


@dataclass(frozen=True)
class EncodedImage:
    """Encoded photo ready to be sent to the relay.

    ``width`` and ``height`` are ``None`` when the photo could not be decoded
    and the original file content is passed through unchanged.
    """

    data: bytes
    media_type: str
    width: int | None = None
    height: int | None = None

    @property
    def size_kb(self) -> int:
        """Payload size in kilobytes, rounded."""
        return round(len(self.data) / 1024)

    def to_base64(self) -> str:
        """Return the payload as base64 text."""
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        """Return the payload as a ``data:`` URL."""
        return f"data:{self.media_type};base64,{self.to_base64()}"

    @classmethod
    def from_base64(cls, encoded: str, media_type: str) -> "EncodedImage":
        """Build an image from base64 text; raises ``ValueError`` when invalid."""
        try:
            data = base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise ValueError("Invalid image data") from exc
        return cls(data=data, media_type=media_type)
