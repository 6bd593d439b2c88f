"""
Base models for kg-dashboard.
"""

from pydantic import BaseModel as PydanticBaseModel


class BaseModel(PydanticBaseModel):
    """
    Base model for all kg-dashboard data structures.

    Provides common configuration and utilities.
    """

    model_config = {
        # Allow field population by name or alias
        "populate_by_name": True,
        # Validate assignments after object creation
        "validate_assignment": True,
        # Use enum values instead of enum names
        "use_enum_values": True,
        "extra": "forbid",
    }
