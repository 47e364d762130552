from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Mask:
    """
    One detected object as an encoded grayscale raster (PNG from the
    segmentation collaborator). Array position is its identity.
    """
    encoded_data: bytes
    native_width: int | None = None   # filled in once decoded
    native_height: int | None = None
    base64_encoded: bool = False      # encoded_data is still base64 text

    @classmethod
    def from_b64(cls, b64: str) -> "Mask":
        # drop a data-URL header ("data:image/png;base64,") when present
        if b64.startswith("data:") and "," in b64:
            b64 = b64.split(",", 1)[1]
        return cls(encoded_data=b64.encode("ascii", errors="replace"), base64_encoded=True)
