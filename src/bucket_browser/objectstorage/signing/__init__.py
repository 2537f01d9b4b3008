"""Time-limited signed access URLs."""

from .presigned import SignedUrlIssuer

__all__ = ["SignedUrlIssuer"]
