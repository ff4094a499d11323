"""Exception types raised across poly-edge."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """No judgment providers are configured, or credentials are missing.

    This is the one oracle failure callers must handle; it is never
    turned into a degraded verdict.
    """


class ProviderError(Exception):
    """A single judgment provider failed (transport, timeout, bad payload).

    Raised inside providers and caught by the oracle, which logs it and
    drops the provider from the vote.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
