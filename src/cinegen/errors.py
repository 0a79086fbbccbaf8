"""Exception types raised by the generation engine."""


class CineGenError(Exception):
    """Base class for all CineGen errors."""


class BudgetInsufficient(CineGenError):
    """Raised before a paid action when the ledger cannot cover its cost."""

    def __init__(self, required: int, remaining: int) -> None:
        self.required = required
        self.remaining = remaining
        super().__init__(
            f"Insufficient credits: {required} required, {remaining} remaining"
        )


class ProviderError(CineGenError):
    """Generic failure reported by the generation provider."""


class NoCandidateError(ProviderError):
    """The image capability produced no candidate."""


class MissingImagePartError(ProviderError):
    """A candidate was produced but carried no image data."""


class LoginError(CineGenError):
    """Raised when a login token fails the entry check."""
