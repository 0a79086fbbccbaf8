"""Credit state model."""

from pydantic import BaseModel, Field

# Balance shown for unlimited mode; never decremented.
UNLIMITED_BALANCE = 999999


class CreditState(BaseModel):
    """Snapshot of the credit budget."""

    remaining: int = Field(default=300, description="Credits left", ge=0)
    is_infinite: bool = Field(default=False, description="Unlimited budget mode")

    class Config:
        """Pydantic config."""
        frozen = True

    def can_afford(self, amount: int) -> bool:
        return self.is_infinite or self.remaining >= amount
