from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

ResponseKind = Literal["results", "no_results", "invalid_input", "error"]

class StoreLocation(BaseModel):
    province: str
    city: str

class StoreView(BaseModel):
    """Store as shown to the user (no score, no embeddings)."""
    id: int
    name: str
    category: str
    location: StoreLocation
    product_types: List[str] = []
    hours: str
    contact: str

class StoreGroup(BaseModel):
    category: str
    stores: List[StoreView]

class ChatbotResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    intro_message: str = Field(..., alias="introMessage")
    store_groups: Optional[List[StoreGroup]] = Field(None, alias="storeGroups")
    kind: ResponseKind

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
