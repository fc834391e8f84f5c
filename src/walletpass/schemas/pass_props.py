"""
pass.json schemas.

Attribute names mirror the pass.json wire format (camelCase). Models
built from user input ignore unknown keys, which are stripped on dump.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    model_validator,
)

from walletpass.core.constants import DEFAULT_BARCODE_ENCODING
from walletpass.schemas.fields import PassFieldContent, PassFieldContentWithRow

PassType = Literal["boardingPass", "coupon", "eventTicket", "storeCard", "generic"]

TransitType = Literal[
    "PKTransitTypeAir",
    "PKTransitTypeBoat",
    "PKTransitTypeBus",
    "PKTransitTypeGeneric",
    "PKTransitTypeTrain",
]

BarcodeFormat = Literal[
    "PKBarcodeFormatQR",
    "PKBarcodeFormatPDF417",
    "PKBarcodeFormatAztec",
    "PKBarcodeFormatCode128",
]

PreferredStyleScheme = Literal["posterEventTicket", "eventTicket"]

_RGB_COLOR = re.compile(r"^rgb\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*\)$")
_URL = re.compile(r"^https?://\S+$")


def _iso_date(value: str) -> str:
    try:
        datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"{value!r} is not an ISO 8601 date") from exc
    return value


def _rgb_color(value: str) -> str:
    if not _RGB_COLOR.match(value):
        raise ValueError(f"{value!r} is not an rgb(r, g, b) color")
    return value


def _url(value: str) -> str:
    if not _URL.match(value):
        raise ValueError(f"{value!r} is not an http(s) URL")
    return value


IsoDate = Annotated[StrictStr, AfterValidator(_iso_date)]
RGBColor = Annotated[StrictStr, AfterValidator(_rgb_color)]
URL = Annotated[StrictStr, AfterValidator(_url)]


class Barcode(BaseModel):
    model_config = ConfigDict(extra="ignore")

    format: BarcodeFormat
    message: StrictStr
    altText: Optional[StrictStr] = None
    messageEncoding: StrictStr = DEFAULT_BARCODE_ENCODING


class Beacon(BaseModel):
    """iBeacon that makes the pass relevant. ``major`` must exceed ``minor``."""

    model_config = ConfigDict(extra="ignore")

    proximityUUID: StrictStr
    major: Optional[int] = Field(default=None, ge=0, le=65535)
    minor: Optional[int] = Field(default=None, ge=0, le=65535)
    relevantText: Optional[StrictStr] = None

    @model_validator(mode="after")
    def _major_above_minor(self) -> "Beacon":
        if self.major is not None and self.minor is not None and self.major <= self.minor:
            raise ValueError("major must be greater than minor")
        return self


class Location(BaseModel):
    model_config = ConfigDict(extra="ignore")

    latitude: float
    longitude: float
    altitude: Optional[float] = None
    relevantText: Optional[StrictStr] = None


class NFC(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: StrictStr = Field(max_length=64)
    encryptionPublicKey: StrictStr
    requiresAuthentication: Optional[StrictBool] = None


class RelevantDateEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    relevantDate: IsoDate


class RelevantDateInterval(BaseModel):
    model_config = ConfigDict(extra="forbid")

    startDate: IsoDate
    endDate: IsoDate


RelevantDate = Union[RelevantDateInterval, RelevantDateEntry]


class OverridablePassProps(BaseModel):
    """
    Top-level pass.json keys that can be overridden by the caller
    (through ``props`` or ``from_source``) without touching fields,
    barcodes or relevance data.
    """

    model_config = ConfigDict(extra="ignore")

    formatVersion: Literal[1] = 1
    semantics: Optional[Dict[str, Any]] = None
    voided: Optional[StrictBool] = None
    logoText: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    serialNumber: Optional[StrictStr] = None
    appLaunchURL: Optional[StrictStr] = None
    teamIdentifier: Optional[StrictStr] = None
    organizationName: Optional[StrictStr] = None
    passTypeIdentifier: Optional[StrictStr] = None
    groupingIdentifier: Optional[StrictStr] = None
    sharingProhibited: Optional[StrictBool] = None
    suppressStripShine: Optional[StrictBool] = None
    suppressHeaderDarkening: Optional[StrictBool] = None
    useAutomaticColors: Optional[StrictBool] = None
    maxDistance: Optional[float] = Field(default=None, gt=0)
    authenticationToken: Optional[StrictStr] = Field(default=None, min_length=16)
    webServiceURL: Optional[URL] = None
    bagPolicyURL: Optional[URL] = None
    orderFoodURL: Optional[URL] = None
    parkingInformationURL: Optional[URL] = None
    directionsInformationURL: Optional[URL] = None
    purchaseParkingURL: Optional[URL] = None
    merchandiseURL: Optional[URL] = None
    transitInformationURL: Optional[URL] = None
    accessibilityURL: Optional[URL] = None
    addOnURL: Optional[URL] = None
    contactVenueEmail: Optional[StrictStr] = None
    contactVenuePhoneNumber: Optional[StrictStr] = None
    contactVenueWebsite: Optional[URL] = None
    associatedStoreIdentifiers: Optional[List[int]] = None
    auxiliaryStoreIdentifiers: Optional[List[int]] = None
    userInfo: Optional[Union[Dict[str, Any], List[Any]]] = None
    labelColor: Optional[RGBColor] = None
    backgroundColor: Optional[RGBColor] = None
    foregroundColor: Optional[RGBColor] = None
    footerBackgroundColor: Optional[RGBColor] = None

    @model_validator(mode="after")
    def _web_service_needs_token(self) -> "OverridablePassProps":
        if self.webServiceURL is not None and self.authenticationToken is None:
            raise ValueError("webServiceURL requires an authenticationToken")
        return self


class PassKindFields(BaseModel):
    """Content of the kind sub-object (e.g. ``"storeCard": {...}``)."""

    model_config = ConfigDict(extra="ignore")

    headerFields: Optional[List[PassFieldContent]] = None
    primaryFields: Optional[List[PassFieldContent]] = None
    secondaryFields: Optional[List[PassFieldContent]] = None
    auxiliaryFields: Optional[List[PassFieldContentWithRow]] = None
    backFields: Optional[List[PassFieldContent]] = None
    transitType: Optional[TransitType] = None


class PassProps(OverridablePassProps):
    """A whole pass.json document."""

    nfc: Optional[NFC] = None
    beacons: Optional[List[Beacon]] = None
    barcodes: Optional[List[Barcode]] = None
    barcode: Optional[Barcode] = None
    locations: Optional[List[Location]] = None
    relevantDate: Optional[IsoDate] = None
    relevantDates: Optional[List[RelevantDate]] = None
    expirationDate: Optional[IsoDate] = None
    preferredStyleSchemes: Optional[List[PreferredStyleScheme]] = None

    boardingPass: Optional[PassKindFields] = None
    coupon: Optional[PassKindFields] = None
    eventTicket: Optional[PassKindFields] = None
    storeCard: Optional[PassKindFields] = None
    generic: Optional[PassKindFields] = None

    @model_validator(mode="after")
    def _transit_type_only_on_boarding_passes(self) -> "PassProps":
        for kind in ("coupon", "eventTicket", "storeCard", "generic"):
            fields = getattr(self, kind)
            if fields is not None and fields.transitType is not None:
                raise ValueError(f"transitType is not allowed on {kind}")
        return self


__all__ = [
    "PassType",
    "TransitType",
    "BarcodeFormat",
    "PreferredStyleScheme",
    "Barcode",
    "Beacon",
    "Location",
    "NFC",
    "RelevantDate",
    "RelevantDateEntry",
    "RelevantDateInterval",
    "OverridablePassProps",
    "PassKindFields",
    "PassProps",
]
