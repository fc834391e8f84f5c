"""
Pass field schemas.

Attribute names mirror the pass.json wire format (camelCase).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr, model_validator

DataDetectorType = Literal[
    "PKDataDetectorTypePhoneNumber",
    "PKDataDetectorTypeLink",
    "PKDataDetectorTypeAddress",
    "PKDataDetectorTypeCalendarEvent",
]

TextAlignment = Literal[
    "PKTextAlignmentLeft",
    "PKTextAlignmentCenter",
    "PKTextAlignmentRight",
    "PKTextAlignmentNatural",
]

DateStyle = Literal[
    "PKDateStyleNone",
    "PKDateStyleShort",
    "PKDateStyleMedium",
    "PKDateStyleLong",
    "PKDateStyleFull",
]

NumberStyle = Literal[
    "PKNumberStyleDecimal",
    "PKNumberStylePercent",
    "PKNumberStyleScientific",
    "PKNumberStyleSpellOut",
]

FieldValue = Union[StrictStr, StrictInt, StrictFloat, datetime]


class PassFieldContent(BaseModel):
    """
    A single field shown on the front or back of a pass.

    Only ``key`` and ``value`` are required; everything else is
    formatting metadata. Unknown attributes make the field invalid.
    """

    model_config = ConfigDict(extra="forbid")

    key: StrictStr
    value: FieldValue
    attributedValue: Optional[FieldValue] = None
    changeMessage: Optional[StrictStr] = None
    dataDetectorTypes: Optional[List[DataDetectorType]] = None
    label: Optional[StrictStr] = None
    textAlignment: Optional[TextAlignment] = None
    semantics: Optional[Dict[str, Any]] = None

    # date formatters
    dateStyle: Optional[DateStyle] = None
    ignoresTimeZone: Optional[StrictBool] = None
    isRelative: Optional[StrictBool] = None
    timeStyle: Optional[DateStyle] = None

    # number formatters
    currencyCode: Optional[StrictStr] = None
    numberStyle: Optional[NumberStyle] = None

    @model_validator(mode="after")
    def _number_formatters_need_number(self) -> "PassFieldContent":
        if self.currencyCode is None and self.numberStyle is None:
            return self
        if not isinstance(self.value, (int, float)):
            raise ValueError("currencyCode and numberStyle are allowed only with numeric values")
        return self


class PassFieldContentWithRow(PassFieldContent):
    """Auxiliary field of event tickets, which may be placed on row 0 or 1."""

    row: Optional[Literal[0, 1]] = None


__all__ = [
    "DataDetectorType",
    "TextAlignment",
    "DateStyle",
    "NumberStyle",
    "PassFieldContent",
    "PassFieldContentWithRow",
]
