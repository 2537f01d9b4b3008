"""Exception hierarchy for bucket-browser."""


class BucketBrowserError(Exception):
    """Base exception for all bucket-browser errors."""

    pass


class ConfigurationError(BucketBrowserError):
    """Raised when the settings are not enough to reach the store."""

    pass


class CredentialSourceError(BucketBrowserError):
    """Raised when a single credential provider fails.

    Never escapes the credential chain: the resolver records the reason and
    moves on to the next provider.
    """

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class NoCredentialsError(BucketBrowserError):
    """Raised when every credential provider failed."""

    def __init__(self, reasons: list[str]):
        self.reasons = list(reasons)
        detail = "; ".join(self.reasons) or "no providers configured"
        super().__init__(f"Unable to resolve object store credentials ({detail})")


class ListingError(BucketBrowserError):
    """Raised when a listing call fails."""

    pass


class SigningError(BucketBrowserError):
    """Raised when a signed URL cannot be issued."""

    pass
