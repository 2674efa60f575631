'''
Shared pydantic building blocks for the API-facing models.
'''
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Rounds an amount half-up to two decimal places."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


# Kept at full precision in Python, written as a 2dp string in JSON.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: str(round_money(v)), return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """
    Base model whose JSON representation uses camelCase keys
    (e.g. coach_id -> coachId), while still accepting snake_case on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
