# authgate/application/dtos/base_dto.py

"""
Base class for custom DTOs.
"""

from pydantic import BaseModel, ConfigDict


class CustomBaseModel(BaseModel):
    """
    Base model for all application DTOs.

    DTOs can be built straight from domain dataclasses or ORM objects.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
