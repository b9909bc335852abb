"""Domain model for claim verification requests."""

from pydantic import BaseModel, Field

from ..errors import InvalidClaimError


def normalize_claim(text: str) -> str:
    """Trim a user supplied claim, rejecting empty input.

    Raises:
        InvalidClaimError: If the claim is empty or whitespace-only
    """
    claim = (text or "").strip()
    if not claim:
        raise InvalidClaimError("Claim must not be empty")
    return claim


class VerificationRequest(BaseModel):
    """A single user-initiated verification of one claim."""

    claim: str = Field(..., description="Trimmed claim text")
    language: str = Field(default="en", description="Language code")
    skip_cache: bool = Field(default=False, description="Ask the backend to bypass its cache")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        json_schema_extra = {
            "example": {
                "claim": "5G towers are making people sick and spreading viruses",
                "language": "en",
                "skip_cache": False,
            }
        }

    @classmethod
    def create(cls, text: str, language: str = "en", skip_cache: bool = False) -> "VerificationRequest":
        """Build a request from raw user input."""
        return cls(claim=normalize_claim(text), language=language or "en", skip_cache=skip_cache)

    def to_payload(self) -> dict:
        """Body of the buffered check request."""
        return {
            "claim": self.claim,
            "language": self.language,
            "skip_cache": self.skip_cache,
        }

    def to_query_params(self) -> dict:
        """Query string of the streaming check request."""
        params = {"claim": self.claim, "language": self.language}
        if self.skip_cache:
            params["skip_cache"] = "true"
        return params
