from pydantic import BaseModel, Field, computed_field, ConfigDict
from tinyurl_app.config import settings


class URLBase(BaseModel):
    # Passed through as-is: the target is not validated as a URL
    long_url: str = Field("", description="The original URL to be shortened")


class URLCreate(URLBase):
    pass


class URLUpdate(URLBase):
    pass


class URLResponse(BaseModel):
    """Response schema that serializes a Mapping record

    - from_attributes=True reads straight from the model attributes
    - @computed_field adds the public short link
    """
    code: str
    long_url: str
    owner_id: str

    @computed_field
    @property
    def short_url(self) -> str:
        """Public redirect link for this code"""
        return f"{settings.base_url}/u/{self.code}"

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)
