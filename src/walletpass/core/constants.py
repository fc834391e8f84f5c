"""
Pass bundle constants: mime types, reserved file names and path patterns.
"""
import re

# Mime types
PASS_MIME_TYPE = "application/vnd.apple.pkpass"
PASSES_MIME_TYPE = "application/vnd.apple.pkpasses"

# Reserved file names (regenerated on close)
PASS_JSON = "pass.json"
MANIFEST_JSON = "manifest.json"
SIGNATURE = "signature"
GENERATED_FILES = frozenset({MANIFEST_JSON, SIGNATURE})

# Personalization
PERSONALIZATION_JSON = "personalization.json"
PERSONALIZATION_MARKER = "personalization"
PERSONALIZATION_LOGO_PATTERN = re.compile(r"personalizationLogo@(?:.{2})", re.IGNORECASE)

# Localization
LPROJ_SUFFIX = ".lproj"
STRINGS_FILE_NAME = "pass.strings"
TRANSLATIONS_FILE_PATTERN = re.compile(
    r"^(?P<lang>[a-zA-Z\-_]+)\.lproj/pass\.strings$"
)

# Icons (at least one is expected by wallet apps)
ICON_PATTERN = re.compile(r"icon(@\d{1}x)?", re.IGNORECASE)

# Packed passes inside a .pkpasses bundle: packed-pass-1, packed-pass-2, ...
PACKED_PASS_PREFIX = "packed-pass-"

# Pass kinds and their field groups
PASS_TYPES = ("boardingPass", "coupon", "eventTicket", "storeCard", "generic")
# Kind lookup order when a pass.json carries more than one kind key
PASS_JSON_KIND_ORDER = ("boardingPass", "eventTicket", "coupon", "generic", "storeCard")
BOARDING_PASS = "boardingPass"
EVENT_TICKET = "eventTicket"

FIELD_GROUPS = (
    "headerFields",
    "primaryFields",
    "secondaryFields",
    "auxiliaryFields",
    "backFields",
)

TRANSIT_TYPES = (
    "PKTransitTypeAir",
    "PKTransitTypeBoat",
    "PKTransitTypeBus",
    "PKTransitTypeGeneric",
    "PKTransitTypeTrain",
)

BARCODE_FORMATS = (
    "PKBarcodeFormatQR",
    "PKBarcodeFormatPDF417",
    "PKBarcodeFormatAztec",
    "PKBarcodeFormatCode128",
)
DEFAULT_BARCODE_ENCODING = "iso-8859-1"

# Template folders get this extension when none is given
MODEL_EXTENSION = ".pass"

PREFERRED_STYLE_SCHEMES = ("posterEventTicket", "eventTicket")
