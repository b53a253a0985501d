"""
Cover image payloads.

Browser upload widgets post a book cover as a JSON document of the
form ``{"type": "<mime>", "data": "<base64>"}``.  ``decode_cover``
turns such a payload into a ``CoverImage`` or returns ``None``.  A
``None`` result is an ordinary outcome, not an error: callers carry on
without a cover and let record validation decide whether one was
required.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

# Corrected from the historical "images/gif" entry, which could never
# match a real upload.
ALLOWED_IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif"})


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Render binary image data as ``data:<mime>;base64,<payload>``."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@dataclass(frozen=True)
class CoverImage:
    data: bytes
    mime_type: str

    @property
    def data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)


def decode_cover(payload: Any) -> Optional[CoverImage]:
    """Decode a cover payload.

    ``payload`` may be a JSON string or a mapping with ``type`` and
    ``data`` keys.  Returns ``None`` when the payload is empty, is not
    valid JSON, is not a mapping, declares a type outside
    ``ALLOWED_IMAGE_MIME_TYPES``, or carries data that is not valid
    base64.
    """
    if payload is None or payload == "":
        return None

    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            logger.debug("Cover payload is not valid JSON; ignoring")
            return None

    if not isinstance(payload, Mapping):
        return None

    mime_type = payload.get("type")
    if not isinstance(mime_type, str) or mime_type not in ALLOWED_IMAGE_MIME_TYPES:
        logger.debug("Cover type %r is not an allowed image type; ignoring", mime_type)
        return None

    encoded = payload.get("data")
    if not isinstance(encoded, str) or not encoded:
        return None
    try:
        data = base64.b64decode(encoded, validate=True)
    except binascii.Error:
        logger.debug("Cover data is not valid base64; ignoring")
        return None
    return CoverImage(data=data, mime_type=mime_type)
