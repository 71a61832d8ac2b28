from pydantic import BaseModel, Field


class Mapping(BaseModel):
    """A live short code -> long URL mapping and the account that owns it"""

    code: str = Field(..., description="Fixed-length alphanumeric short code")
    long_url: str = Field(..., description="Target URL (passed through, not validated)")
    owner_id: str = Field(..., description="Id of the account that created it")
