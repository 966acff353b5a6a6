"""JSON encoding used for request bodies, view parameters and response bodies."""

import json
from typing import Any


class JsonCodec:
    """Encodes values to JSON text and decodes response bodies."""

    def encode(self, value: Any) -> str:
        return json.dumps(value, ensure_ascii=False)

    def decode(self, raw: str | bytes) -> Any:
        """Decode a JSON document.

        Args:
            raw (str | bytes): JSON text, bytes are read as UTF-8.

        Returns:
            Any: The decoded mapping, list or scalar.

        Raises:
            ValueError: If the input is not valid JSON.
        """
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)
