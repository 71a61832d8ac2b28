from pydantic import BaseModel, Field, ConfigDict


class Credentials(BaseModel):
    # Defaults let a missing field surface as InvalidInputError (400), not 422
    email: str = Field("", description="Account email (case-sensitive)")
    password: str = Field("", description="Plaintext password, only ever hashed")


class AccountResponse(BaseModel):
    """Public view of an account: never includes the credential hash"""
    id: str
    email: str

    model_config = ConfigDict(from_attributes=True)
