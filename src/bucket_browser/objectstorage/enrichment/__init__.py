"""Best-effort metadata enrichment for listed objects."""

from .content_type import MetadataEnricher

__all__ = ["MetadataEnricher"]
