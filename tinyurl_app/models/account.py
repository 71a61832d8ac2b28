from pydantic import BaseModel, Field


class Account(BaseModel):
    """
    Account record.

    The codes an account owns are tracked by the MappingStore ownership
    index, not here, so that mapping lifecycle and ownership change together
    under one lock.
    """

    id: str = Field(..., description="Opaque unique account id")
    email: str = Field(..., description="Unique email (case-sensitive)")
    credential_hash: str = Field(..., repr=False, description="bcrypt hash of the password")
