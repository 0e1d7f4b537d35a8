"""
Pydantic schema for catalog products.

Products are loaded once from static data and never mutated, so the
model is frozen.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """One catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Identifier, unique within the catalog",
        min_length=1,
        examples=["1", "27"]
    )
    name: str = Field(..., description="Display name", examples=["MacBook Air M2"])
    brand: str = Field(..., examples=["Apple"])
    category: str = Field(
        ...,
        description="Open enumeration, e.g. Laptops, Headphones, Gaming",
        examples=["Laptops"]
    )
    price: float = Field(..., description="Currency-agnostic price", ge=0, examples=[1199])
    description: str = Field("", description="Free-text description")
    features: List[str] = Field(default_factory=list, description="Short feature bullets")
    rating: Optional[float] = Field(None, ge=0, le=5)
    in_stock: bool = True

    def prompt_projection(self) -> dict:
        """Fields sent to the model when ranking the catalog."""
        return self.model_dump(
            include={"id", "name", "brand", "category", "price", "description", "features"}
        )
