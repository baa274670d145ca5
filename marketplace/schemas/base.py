# marketplace/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for request/response bodies.

    The storefront speaks camelCase (customerId, shippingAddress, ...);
    snake_case names are accepted too.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
