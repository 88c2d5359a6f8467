"""Invoice service configuration."""

from pydantic import BaseModel, Field

from core.models.invoice import MAX_PAYMENT_TERMS_DAYS


class InvoiceConfig(BaseModel):
    """
    Invoice write-path configuration.

    Defaults reproduce the behaviour callers already rely on; override
    only for tests or deployments with different billing terms.
    """

    default_payment_terms: int = Field(
        default=1,
        description="Payment terms in days applied when a new invoice does not specify any",
        ge=0,
        le=MAX_PAYMENT_TERMS_DAYS,
    )
    id_letters: int = Field(
        default=2,
        description="Uppercase letters at the start of a generated invoice id",
        ge=1,
        le=6,
    )
    id_digits: int = Field(
        default=4,
        description="Digits following the letters of a generated invoice id",
        ge=1,
        le=10,
    )
    id_generation_attempts: int = Field(
        default=5,
        description="How many fresh ids to try before giving up on a collision",
        ge=1,
        le=50,
    )
