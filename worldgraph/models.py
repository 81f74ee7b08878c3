from pydantic import BaseModel, ConfigDict, Field


# --- Request and storage schemas ---


class Pair(BaseModel):
    """Unordered combination of two operands, as received from a caller."""

    model_config = ConfigDict(frozen=True)

    a: str = Field(description="First operand.")
    b: str = Field(description="Second operand.")

    def canonical(self) -> "Pair":
        """Return the order-normalised pair used as the storage key.

        Combination is commutative, so ``A + B`` and ``B + A`` must collapse to
        one row. The greater string (codepoint ordering) goes into ``a``. No
        case folding is applied.
        """
        if self.a < self.b:
            return Pair(a=self.b, b=self.a)
        return self


class Triple(BaseModel):
    """A persisted fact: canonical pair plus the derived result."""

    model_config = ConfigDict(frozen=True)

    a: str
    b: str
    c: str = Field(description="Result of combining a and b.")

    def render(self) -> str:
        return f"% {self.a} + {self.b} = {self.c}"


def canonicalize(a: str, b: str) -> Pair:
    return Pair(a=a, b=b).canonical()
