"""personalization.json schema (reward-enrollment passes)."""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

PersonalizationField = Literal[
    "PKPassPersonalizationFieldName",
    "PKPassPersonalizationFieldPostalCode",
    "PKPassPersonalizationFieldEmailAddress",
    "PKPassPersonalizationFieldPhoneNumber",
]


class Personalization(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: StrictStr
    requiredPersonalizationFields: List[PersonalizationField] = Field(min_length=1)
    termsAndConditions: Optional[StrictStr] = None


__all__ = ["Personalization", "PersonalizationField"]
