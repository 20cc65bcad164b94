"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class UpstreamExchangeError(ProviderError):
    """The provider rejected an authorization-code exchange or answered garbage.

    Attributes:
        status_code: HTTP status returned by the provider, if any
        body: Raw response body, for logs only
    """

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class SigningKeyError(ProviderError):
    """Provider signing keys could not be fetched or parsed."""

    pass
