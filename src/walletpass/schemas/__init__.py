"""
Pydantic schemas for pass.json, personalization.json and signing material.
"""
from walletpass.schemas.certificates import Certificates, Template
from walletpass.schemas.fields import PassFieldContent, PassFieldContentWithRow
from walletpass.schemas.pass_props import (
    NFC,
    Barcode,
    BarcodeFormat,
    Beacon,
    Location,
    OverridablePassProps,
    PassKindFields,
    PassProps,
    PassType,
    PreferredStyleScheme,
    RelevantDate,
    RelevantDateEntry,
    RelevantDateInterval,
    TransitType,
)
from walletpass.schemas.personalization import Personalization
from walletpass.schemas.validation import assert_validity, filter_valid, is_valid, validate

__all__ = [
    "Certificates",
    "Template",
    "PassFieldContent",
    "PassFieldContentWithRow",
    "NFC",
    "Barcode",
    "BarcodeFormat",
    "Beacon",
    "Location",
    "OverridablePassProps",
    "PassKindFields",
    "PassProps",
    "PassType",
    "PreferredStyleScheme",
    "RelevantDate",
    "RelevantDateEntry",
    "RelevantDateInterval",
    "TransitType",
    "Personalization",
    "assert_validity",
    "filter_valid",
    "is_valid",
    "validate",
]
