"""Signing material and template schemas."""
import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictStr, field_validator

PemData = Union[StrictBytes, StrictStr]


class Certificates(BaseModel):
    """
    PEM signing material.

    Each value may be given as PEM text, PEM bytes or a path to a PEM
    file, which is read on validation. Keys are accepted both in
    snake_case and in their camelCase form (``signerCert``...).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    wwdr: PemData
    signer_cert: PemData = Field(alias="signerCert")
    signer_key: PemData = Field(alias="signerKey")
    signer_key_passphrase: Optional[StrictStr] = Field(default=None, alias="signerKeyPassphrase")

    @field_validator("wwdr", "signer_cert", "signer_key", mode="before")
    @classmethod
    def _read_pem_files(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            try:
                return Path(value).read_bytes()
            except OSError as exc:
                raise ValueError(f"cannot read {value}: {exc}") from exc
        return value

    @field_validator("wwdr", "signer_cert", "signer_key")
    @classmethod
    def _not_empty(cls, value: Union[bytes, str]) -> Union[bytes, str]:
        if not value or not value.strip():
            raise ValueError("PEM data must not be empty")
        return value

    @classmethod
    def from_files(
        cls,
        wwdr: Union[str, Path],
        signer_cert: Union[str, Path],
        signer_key: Union[str, Path],
        signer_key_passphrase: Optional[str] = None,
    ) -> "Certificates":
        """Build certificates from PEM files on disk."""
        return cls(
            wwdr=Path(wwdr),
            signer_cert=Path(signer_cert),
            signer_key=Path(signer_key),
            signer_key_passphrase=signer_key_passphrase,
        )


class Template(BaseModel):
    """A template folder, optionally with the certificates used to sign passes built from it."""

    model_config = ConfigDict(extra="forbid")

    model: StrictStr = Field(min_length=1)
    certificates: Optional[Certificates] = None


__all__ = ["Certificates", "Template", "PemData"]
