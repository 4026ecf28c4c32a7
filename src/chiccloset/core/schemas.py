"""Shared schema base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON field names are camelCase.

    The storefront wire format uses ``inStock``, ``userId``,
    ``transactionId``...; Python code keeps snake_case attributes and
    either form is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
