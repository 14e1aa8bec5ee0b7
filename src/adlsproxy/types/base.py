"""Base model class for proxy models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class ProxyBaseModel(BaseModel):
    """Base model for all proxy value objects.

    Models are immutable: a request is parsed once at the boundary and
    passed through the builder unchanged.
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to a JSON-friendly dictionary.

        Enums are reduced to their values and ``None`` fields dropped.
        """
        return self.model_dump(mode="json", by_alias=False, exclude_none=True)
