"""Object storage listing operations."""

from .prefix_contents import S3PrefixLister, breadcrumbs

__all__ = ["S3PrefixLister", "breadcrumbs"]
