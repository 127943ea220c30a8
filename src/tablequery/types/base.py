"""Base model class for all tablequery value objects."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class TQBaseModel(BaseModel):
    """Base model for schema descriptors and builders.

    Provides common functionality for all tablequery models:
    - Immutability (``frozen=True``); derived values are produced with
      ``model_copy(update=...)`` so branches never share mutable state
    - Serialization to dictionary via to_dict()
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        use_enum_values=True,
        frozen=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization.

        Tuples are emitted as lists so the result is JSON friendly.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert_nested(item) for item in obj]
            elif hasattr(obj, 'value'):  # Handle enums
                return obj.value
            return obj

        return convert_nested(data)
