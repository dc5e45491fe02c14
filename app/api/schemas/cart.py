from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class AddItemRequest(BaseModel):
    # quantity is range-checked by the service so bad values answer 400, not 422
    productId: Optional[Union[str, int]] = None
    legacy_id: Optional[Union[str, int]] = Field(None, alias="_id")
    quantity: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def product_id(self) -> Optional[Union[str, int]]:
        return self.productId if self.productId not in (None, "") else self.legacy_id


class UpdateItemRequest(BaseModel):
    quantity: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class EnrichedCartLineOut(BaseModel):
    id: str
    productId: str
    quantity: int
    name: str
    description: str = ""
    price: float = 0.0
    image: str
    stock: int = 0


class CartOut(BaseModel):
    userId: str
    items: List[EnrichedCartLineOut] = []


class CartWithIdOut(CartOut):
    id: str
