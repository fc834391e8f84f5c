"""
PKPass: the pass descriptor state machine built on top of Bundle.

A pass accumulates buffers, properties, fields and translations until it
is exported. The first export closes it: pass.json, translation files,
manifest and signature are generated and the bundle is frozen.
"""
import copy
import json
import re
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from pydantic import ValidationError

from walletpass.core import messages, model_loader, strings_file
from walletpass.core.bundle import Bundle
from walletpass.core.constants import (
    BARCODE_FORMATS,
    BOARDING_PASS,
    EVENT_TICKET,
    FIELD_GROUPS,
    GENERATED_FILES,
    ICON_PATTERN,
    LPROJ_SUFFIX,
    MANIFEST_JSON,
    PACKED_PASS_PREFIX,
    PASS_JSON,
    PASS_JSON_KIND_ORDER,
    PASS_MIME_TYPE,
    PASS_TYPES,
    PASSES_MIME_TYPE,
    PERSONALIZATION_JSON,
    PERSONALIZATION_LOGO_PATTERN,
    PERSONALIZATION_MARKER,
    PREFERRED_STYLE_SCHEMES,
    SIGNATURE,
    STRINGS_FILE_NAME,
    TRANSIT_TYPES,
    TRANSLATIONS_FILE_PATTERN,
)
from walletpass.core.dates import DateLike, process_date
from walletpass.core.errors import BundleClosedError, CertificatesError
from walletpass.core.fields_array import FieldsArray
from walletpass.core.signature import create_hash, create_signature
from walletpass.schemas import (
    NFC,
    Barcode,
    Beacon,
    Certificates,
    Location,
    OverridablePassProps,
    PassFieldContent,
    PassFieldContentWithRow,
    PassProps,
    Personalization,
    Template,
    assert_validity,
    filter_valid,
    validate,
)
from walletpass.utils.logging import get_logger, log_context

logger = get_logger(__name__)

_PATH_SEPARATORS = re.compile(r"[\\/]")

# Default of ``localize``; ``None`` is the explicit "remove language" signal.
_UNSET: Any = object()


def _normalize_path(path: str) -> str:
    return "/".join(_PATH_SEPARATORS.split(path))


def _render(value: Any) -> Any:
    """Deep copy of the property bag with FieldsArrays turned into lists."""
    if isinstance(value, FieldsArray):
        return value.to_list()
    if isinstance(value, dict):
        return {key: _render(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_render(item) for item in value]
    return copy.deepcopy(value)


class PKPass(Bundle):
    """
    A single wallet pass.

    Example:
        >>> pkpass = PKPass({"icon.png": icon}, certificates, {"serialNumber": "42"})
        >>> pkpass.type = "storeCard"
        >>> pkpass.primary_fields.push({"key": "balance", "value": "21.00"})
        1
        >>> archive = pkpass.get_as_bytes()
    """

    def __init__(
        self,
        buffers: Optional[Mapping[str, bytes]] = None,
        certificates: Union[Certificates, Mapping[str, Any], None] = None,
        props: Optional[Mapping[str, Any]] = None,
    ):
        """
        Args:
            buffers: Initial files (``path -> bytes``), e.g. a loaded template
            certificates: Signing material, required before export
            props: pass.json properties overriding the ones in buffers;
                unknown keys are dropped

        Raises:
            CertificatesError: If certificates are incomplete
            TypeError: If props are invalid
        """
        super().__init__(PASS_MIME_TYPE)

        self._props: Dict[str, Any] = {}
        self._localizations: Dict[str, Dict[str, str]] = {}
        self._type: Optional[str] = None
        self._fields_pool: Set[str] = set()
        self._certificates: Optional[Certificates] = None

        if certificates is not None:
            self.certificates = certificates

        if buffers is not None:
            if isinstance(buffers, Mapping):
                for path, data in buffers.items():
                    self.add_buffer(path, data)
            else:
                logger.warning("pass_buffers_ignored", received=type(buffers).__name__)

        if props:
            overrides = assert_validity(OverridablePassProps, props, messages.PROPS_INVALID)
            self._props.update(overrides)

    # Construction helpers

    @classmethod
    def from_source(
        cls,
        source: Union["PKPass", Template, Mapping[str, Any]],
        props: Optional[Mapping[str, Any]] = None,
    ) -> "PKPass":
        """
        Create a pass from another pass or from a template folder.

        A pass source is cloned: its buffers are copied, pass.json is
        rebuilt from its current properties and its certificates are
        reused. A template (``{"model": path, "certificates": {...}}``)
        is read from disk.

        Raises:
            TypeError: If source is missing or not a valid template
            ModelNotFoundError: If the template folder cannot be read
        """
        if not source:
            raise TypeError(messages.format(messages.FROM_MISSING_SOURCE, source))

        if isinstance(source, PKPass):
            buffers = {
                path: bytes(bytearray(data))
                for path, data in source._files.items()
                if path not in GENERATED_FILES
            }
            buffers[PASS_JSON] = json.dumps(source.props).encode("utf-8")

            clone = cls(buffers, source.certificates, props)
            for lang, translations in source._localizations.items():
                if translations:
                    clone.localize(lang, dict(translations))
            return clone

        try:
            template = source if isinstance(source, Template) else Template.model_validate(source)
        except ValidationError as exc:
            raise TypeError(messages.format(messages.TEMPLATE_INVALID, exc)) from exc

        buffers = model_loader.get_model_folder_contents(template.model)
        logger.info("pass_template_loaded", model=template.model, files=len(buffers))
        return cls(buffers, template.certificates, props)

    @classmethod
    def pack(cls, *passes: "PKPass") -> Bundle:
        """
        Bundle several passes into one frozen ``.pkpasses`` archive.

        Each pass is exported (and closed) and stored as
        ``packed-pass-<n>``, in argument order.

        Raises:
            TypeError: If any element is not a PKPass
        """
        if not all(isinstance(pkpass, PKPass) for pkpass in passes):
            raise TypeError(messages.PACK_INVALID)

        bundle, freeze = Bundle.freezable(PASSES_MIME_TYPE)
        for index, pkpass in enumerate(passes, start=1):
            bundle.add_buffer(f"{PACKED_PASS_PREFIX}{index}", pkpass.get_as_bytes())
        freeze()

        logger.info("passes_packed", count=len(passes))
        return bundle

    # Properties

    def _ensure_open(self) -> None:
        if self.is_frozen:
            raise BundleClosedError(messages.BUNDLE_CLOSED)

    @property
    def certificates(self) -> Optional[Certificates]:
        return self._certificates

    @certificates.setter
    def certificates(self, value: Union[Certificates, Mapping[str, Any]]) -> None:
        self._ensure_open()
        if isinstance(value, Certificates):
            self._certificates = value
            return
        try:
            self._certificates = Certificates.model_validate(value)
        except ValidationError as exc:
            raise CertificatesError(messages.format(messages.CERTIFICATES_INVALID, exc)) from exc

    @property
    def props(self) -> Dict[str, Any]:
        """Copy of the pass.json properties, fields included."""
        return _render(self._props)

    @property
    def type(self) -> Optional[str]:
        return self._type

    @type.setter
    def type(self, kind: str) -> None:
        """
        Switch the pass kind.

        The previous kind sub-object is discarded together with its fields:
        the new kind gets five empty field groups sharing a new key pool.
        """
        self._ensure_open()
        if kind not in PASS_TYPES:
            raise TypeError(messages.format(messages.PASS_TYPE_INVALID, kind))

        if self._type is not None:
            self._props.pop(self._type, None)
            if self._type == EVENT_TICKET:
                self._props.pop("preferredStyleSchemes", None)

        pool: Set[str] = set()
        auxiliary_schema = PassFieldContentWithRow if kind == EVENT_TICKET else PassFieldContent
        self._fields_pool = pool
        self._props[kind] = {
            group: FieldsArray(
                self,
                pool,
                auxiliary_schema if group == "auxiliaryFields" else PassFieldContent,
            )
            for group in FIELD_GROUPS
        }
        self._type = kind

    def _field_group(self, group: str) -> FieldsArray:
        if self._type is None:
            raise TypeError(messages.format(messages.PASS_TYPE_MISSING_FIELDS, group))
        return self._props[self._type][group]

    @property
    def header_fields(self) -> FieldsArray:
        return self._field_group("headerFields")

    @property
    def primary_fields(self) -> FieldsArray:
        return self._field_group("primaryFields")

    @property
    def secondary_fields(self) -> FieldsArray:
        return self._field_group("secondaryFields")

    @property
    def auxiliary_fields(self) -> FieldsArray:
        return self._field_group("auxiliaryFields")

    @property
    def back_fields(self) -> FieldsArray:
        return self._field_group("backFields")

    @property
    def transit_type(self) -> Optional[str]:
        if self._type != BOARDING_PASS:
            return None
        return self._props[BOARDING_PASS].get("transitType")

    @transit_type.setter
    def transit_type(self, value: Optional[str]) -> None:
        self._ensure_open()
        if self._type != BOARDING_PASS:
            raise TypeError(messages.TRANSIT_TYPE_UNEXPECTED_PASS_TYPE)

        if value is None:
            self._props[BOARDING_PASS].pop("transitType", None)
            return

        if value not in TRANSIT_TYPES:
            raise TypeError(messages.format(messages.TRANSIT_TYPE_INVALID, value))
        self._props[BOARDING_PASS]["transitType"] = value

    @property
    def preferred_style_schemes(self) -> Optional[List[str]]:
        schemes = self._props.get("preferredStyleSchemes")
        return list(schemes) if schemes is not None else None

    @preferred_style_schemes.setter
    def preferred_style_schemes(self, value: Optional[List[str]]) -> None:
        self._ensure_open()
        if self._type != EVENT_TICKET:
            raise TypeError(messages.PREFERRED_STYLE_SCHEMES_UNEXPECTED_PASS_TYPE)

        if value is None:
            self._props.pop("preferredStyleSchemes", None)
            return

        if isinstance(value, str) or not all(scheme in PREFERRED_STYLE_SCHEMES for scheme in value):
            raise TypeError(messages.format(messages.PREFERRED_STYLE_SCHEMES_INVALID, value))
        self._props["preferredStyleSchemes"] = list(value)

    @property
    def languages(self) -> List[str]:
        return list(self._localizations)

    # Buffers

    def add_buffer(self, path: str, data: Optional[bytes]) -> None:
        """
        Add a file to the pass.

        manifest.json and signature are ignored (they are generated);
        the first pass.json is imported into the pass properties;
        personalization.json is stored only when valid; translation files
        (``<lang>.lproj/pass.strings``) are merged into the localizations.

        Raises:
            BundleClosedError: If the pass is frozen
        """
        self._ensure_open()

        if path in GENERATED_FILES:
            logger.debug("generated_file_ignored", path=path)
            return

        if path == PASS_JSON:
            if PASS_JSON in self._files:
                logger.debug("pass_json_already_received")
                return
            try:
                self._import_pass_json(data)
            except (ValueError, TypeError) as exc:
                logger.warning("pass_json_invalid", error=str(exc))
            # Placeholder: pass.json is rebuilt from props on close
            self._files[PASS_JSON] = b""
            return

        if path == PERSONALIZATION_JSON:
            try:
                validate(Personalization, json.loads(data or b""))
            except (ValueError, TypeError) as exc:
                logger.warning("personalization_json_invalid", error=str(exc))
                return
            super().add_buffer(path, data)
            return

        normalized = _normalize_path(path)
        match = TRANSLATIONS_FILE_PATTERN.match(normalized)
        if match:
            parsed = strings_file.parse(data or b"")
            if not parsed.translations:
                logger.debug("translations_file_empty", path=normalized)
                return
            self.localize(match.group("lang"), parsed.translations)
            return

        super().add_buffer(normalized, data)

    def _import_pass_json(self, data: Optional[bytes]) -> None:
        raw = json.loads(data or b"")
        if not isinstance(raw, dict):
            raise TypeError(f"pass.json must contain an object, got {type(raw).__name__}")

        kind = next((candidate for candidate in PASS_JSON_KIND_ORDER if candidate in raw), None)
        validated = validate(PassProps, raw)
        kind_fields: Dict[str, Any] = {}
        for candidate in PASS_TYPES:
            content = validated.pop(candidate, None)
            if candidate == kind and content is not None:
                kind_fields = content

        if self._props:
            logger.warning("pass_props_overwritten", keys=sorted(self._props))
        self._props.update(validated)

        if kind is None:
            if self._type is None:
                logger.warning("pass_type_missing")
            return

        self.type = kind
        for group in FIELD_GROUPS:
            if kind_fields.get(group):
                self._props[kind][group].push(*kind_fields[group])

        if kind == BOARDING_PASS and kind_fields.get("transitType"):
            self.transit_type = kind_fields["transitType"]

    # Localization

    def localize(self, lang: str, translations: Optional[Mapping[str, str]] = _UNSET) -> None:
        """
        Add translations for a language, or remove it when translations is None.

        Repeated calls merge translations. Removing a language also deletes
        every file stored in its ``<lang>.lproj`` folder.

        Raises:
            TypeError: If lang is not a string
            BundleClosedError: If the pass is frozen
        """
        self._ensure_open()
        if not isinstance(lang, str):
            raise TypeError(messages.format(messages.LANGUAGES_INVALID_LANG, type(lang).__name__))

        if translations is None:
            self._localizations.pop(lang, None)
            prefix = f"{lang}{LPROJ_SUFFIX}/"
            for path in [path for path in self._files if path.startswith(prefix)]:
                del self._files[path]
            return

        if translations is _UNSET or not translations:
            logger.warning("translations_missing", lang=lang)
            return

        self._localizations.setdefault(lang, {}).update(translations)

    # Property setters

    def set_beacons(self, *beacons: Any) -> None:
        """Set the beacons; invalid ones are dropped. ``None`` removes them."""
        self._ensure_open()
        if beacons and beacons[0] is None:
            self._props.pop("beacons", None)
            return
        self._props["beacons"] = filter_valid(Beacon, beacons)

    def set_locations(self, *locations: Any) -> None:
        """Set the locations; invalid ones are dropped. ``None`` removes them."""
        self._ensure_open()
        if locations and locations[0] is None:
            self._props.pop("locations", None)
            return
        self._props["locations"] = filter_valid(Location, locations)

    def set_barcodes(self, *barcodes: Any) -> None:
        """
        Set the barcodes.

        A single string is used as message of one barcode per supported
        format. Objects are validated and invalid ones dropped. ``None``
        removes the barcodes; no argument leaves them untouched.

        Raises:
            TypeError: If no valid barcode is given
        """
        self._ensure_open()
        if not barcodes:
            return

        first = barcodes[0]
        if first is None:
            self._props.pop("barcodes", None)
            return

        if isinstance(first, str):
            valid = [validate(Barcode, {"format": fmt, "message": first}) for fmt in BARCODE_FORMATS]
        else:
            valid = filter_valid(Barcode, barcodes)
            if not valid:
                raise TypeError(messages.BARCODES_INVALID)

        self._props["barcodes"] = valid

    def set_nfc(self, nfc: Optional[Mapping[str, Any]]) -> None:
        """
        Set the NFC payload. ``None`` removes it.

        Raises:
            TypeError: If nfc is invalid
        """
        self._ensure_open()
        if nfc is None:
            self._props.pop("nfc", None)
            return
        self._props["nfc"] = assert_validity(NFC, nfc, messages.NFC_INVALID)

    def set_expiration_date(self, date: Optional[DateLike]) -> None:
        self._ensure_open()
        if date is None:
            self._props.pop("expirationDate", None)
            return
        self._props["expirationDate"] = process_date("expirationDate", date)

    def set_relevant_date(self, date: Optional[DateLike]) -> None:
        self._ensure_open()
        if date is None:
            self._props.pop("relevantDate", None)
            return
        self._props["relevantDate"] = process_date("relevantDate", date)

    def set_relevant_dates(self, *entries: Any) -> None:
        """
        Set relevance entries: ``{"relevantDate": d}`` or
        ``{"startDate": d1, "endDate": d2}``. ``None`` removes them.

        Raises:
            TypeError: If a date is invalid
        """
        self._ensure_open()
        if entries and entries[0] is None:
            self._props.pop("relevantDates", None)
            return

        processed: List[Dict[str, str]] = []
        for entry in entries:
            if isinstance(entry, Mapping) and "relevantDate" in entry:
                processed.append({"relevantDate": process_date("relevantDate", entry["relevantDate"])})
            elif isinstance(entry, Mapping) and "startDate" in entry and "endDate" in entry:
                processed.append(
                    {
                        "startDate": process_date("startDate", entry["startDate"]),
                        "endDate": process_date("endDate", entry["endDate"]),
                    }
                )
            else:
                logger.warning("relevant_date_ignored", entry=repr(entry))
        self._props["relevantDates"] = processed

    # Finalization

    def _remove_incomplete_personalization(self) -> None:
        has_logo = any(PERSONALIZATION_LOGO_PATTERN.search(path) for path in self._files)
        if PERSONALIZATION_JSON in self._files and has_logo and "nfc" in self._props:
            return

        for path in [path for path in self._files if PERSONALIZATION_MARKER in path]:
            logger.warning("personalization_file_removed", path=path)
            del self._files[path]

    def _close(self) -> None:
        """Generate pass.json, translations, manifest and signature, then freeze."""
        if self.is_frozen:
            return

        if self._type is None:
            raise TypeError(messages.CLOSE_MISSING_TYPE)
        if self._type == BOARDING_PASS and not self.transit_type:
            raise TypeError(messages.CLOSE_MISSING_TRANSIT_TYPE)
        if self._certificates is None:
            raise CertificatesError(messages.CERTIFICATES_MISSING)

        with log_context(pass_type=self._type, serial_number=self._props.get("serialNumber")):
            self._files[PASS_JSON] = json.dumps(self.props).encode("utf-8")

            if not any(ICON_PATTERN.search(path) for path in self._files):
                logger.warning("pass_icon_missing")

            for lang, translations in self._localizations.items():
                content = strings_file.create(translations)
                if content:
                    self._files[f"{lang}{LPROJ_SUFFIX}/{STRINGS_FILE_NAME}"] = content

            self._remove_incomplete_personalization()

            manifest = {
                path: create_hash(data)
                for path, data in self._files.items()
                if path not in GENERATED_FILES
            }
            manifest_bytes = json.dumps(manifest, sort_keys=True).encode("utf-8")
            signature = create_signature(manifest_bytes, self._certificates)

            self._files[MANIFEST_JSON] = manifest_bytes
            self._files[SIGNATURE] = signature
            self._freeze()

            logger.info("pass_closed", files=len(self._files))

    # Export

    def get_as_bytes(self) -> bytes:
        """Close the pass and return the .pkpass archive bytes."""
        self._close()
        return super().get_as_bytes()

    def get_as_raw(self) -> Mapping[str, bytes]:
        """Close the pass and return its files."""
        self._close()
        return super().get_as_raw()
