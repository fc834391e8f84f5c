"""
Error messages raised by the pass builder.

Templates use ``%s`` placeholders, filled positionally by :func:`format`.
"""
from typing import Any

BUNDLE_MIME_TYPE_MISSING = "Cannot build Bundle. MimeType is missing"
BUNDLE_CLOSED = "Cannot add file or set property. Bundle is closed."
BUNDLE_INVALID_BUFFER = "Cannot add file '%s'. Expected bytes but received %s"

CERTIFICATES_INVALID = (
    "Invalid certificate(s) loaded. %s. Please provide valid WWDR certificates "
    "and developer signer certificate and key (with passphrase)."
)
CERTIFICATES_MISSING = "Cannot sign the pass: certificates are missing."

TRANSIT_TYPE_UNEXPECTED_PASS_TYPE = (
    "Cannot set transitType on a pass with type different from boardingPass."
)
TRANSIT_TYPE_INVALID = "Cannot set transitType because not compliant with Apple specifications - %s"

PREFERRED_STYLE_SCHEMES_UNEXPECTED_PASS_TYPE = (
    "Cannot use preferredStyleSchemes on a pass with type different from eventTicket."
)
PREFERRED_STYLE_SCHEMES_INVALID = "Cannot set preferredStyleSchemes - %s"

PASS_TYPE_INVALID = "Cannot set type because not compliant with Apple specifications - %s"
PASS_TYPE_MISSING_FIELDS = "Cannot access %s: pass type is not set yet."

TEMPLATE_INVALID = "Cannot create pass from a template. %s"
PROPS_INVALID = "Cannot apply pass props. %s"

DATE_INVALID = "Cannot set %s. Invalid date %s"

LANGUAGES_INVALID_LANG = (
    "Cannot set localization. Expected a string for 'lang' but received a %s"
)

BARCODES_INVALID = "Cannot set barcodes: none of the provided barcodes is valid."
NFC_INVALID = "Cannot set NFC. %s"

CLOSE_MISSING_TYPE = "Cannot proceed creating the pass because type is missing."
CLOSE_MISSING_TRANSIT_TYPE = (
    "Cannot proceed creating the pass because transitType is missing on your boardingPass."
)

MODELS_DIR_NOT_FOUND = "Cannot import model: directory %s not found."
MODELS_FILE_NO_OPEN = "Cannot open model file. %s"

FROM_MISSING_SOURCE = "Cannot create PKPass from source: source is '%s'"

PACK_INVALID = "Cannot pack passes. Only PKPass instances allowed"


def format(message: str, *values: Any) -> str:  # noqa: A001
    """Fill ``%s`` placeholders of ``message`` in order."""
    replacements = iter(values)
    parts = message.split("%s")
    result = parts[0]
    for part in parts[1:]:
        result += str(next(replacements, "")) + part
    return result
