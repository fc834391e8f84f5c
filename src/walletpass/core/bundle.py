"""
Bundle: an in-memory archive container that can be frozen exactly once.
"""
import io
import time
import zipfile
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from walletpass.core import messages
from walletpass.core.errors import BundleClosedError


class Bundle:
    """
    Collects named byte buffers and exports them as a ZIP archive.

    Once any export happens the bundle is frozen: the file set can no
    longer change and every later export returns the same content.
    """

    def __init__(self, mime_type: str):
        """
        Args:
            mime_type: Mime type of the exported archive
                (e.g. "application/vnd.apple.pkpass")

        Raises:
            ValueError: If mime_type is empty
        """
        if not mime_type:
            raise ValueError(messages.BUNDLE_MIME_TYPE_MISSING)

        self._mime_type = mime_type
        self._files: Dict[str, bytes] = {}
        self._frozen = False
        self._archive: Optional[bytes] = None

    @classmethod
    def freezable(cls, mime_type: str) -> Tuple["Bundle", Callable[[], None]]:
        """
        Create a bundle together with its freeze function.

        Used when a bundle must be closed to further additions before the
        caller decides how to export it (e.g. a bundle of packed passes).
        """
        bundle = cls(mime_type)
        return bundle, bundle._freeze

    @property
    def mime_type(self) -> str:
        return self._mime_type

    @property
    def is_frozen(self) -> bool:
        """True once the bundle refuses new files."""
        return self._frozen

    @property
    def files(self) -> Mapping[str, bytes]:
        """Read-only view of the currently stored buffers."""
        return MappingProxyType(self._files)

    def _freeze(self) -> None:
        if self._frozen:
            return
        self._frozen = True

    def add_buffer(self, path: str, data: Optional[bytes]) -> None:
        """
        Add (or overwrite) a file in the bundle.

        Empty or missing data is ignored.

        Raises:
            BundleClosedError: If the bundle is frozen
            TypeError: If data is not bytes-like
        """
        if self._frozen:
            raise BundleClosedError(messages.BUNDLE_CLOSED)

        if not data:
            return

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                messages.format(messages.BUNDLE_INVALID_BUFFER, path, type(data).__name__)
            )

        self._files[path] = bytes(data)

    def _build_archive(self) -> bytes:
        buf = io.BytesIO()
        date_time = time.localtime()[:6]
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
            for path, data in self._files.items():
                info = zipfile.ZipInfo(path, date_time=date_time)
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, data)
        return buf.getvalue()

    def get_as_bytes(self) -> bytes:
        """Freeze the bundle and return it as ZIP archive bytes."""
        self._freeze()
        if self._archive is None:
            self._archive = self._build_archive()
        return self._archive

    def get_as_stream(self) -> io.BytesIO:
        """Freeze the bundle and return a readable stream over the archive."""
        return io.BytesIO(self.get_as_bytes())

    def get_as_raw(self) -> Mapping[str, bytes]:
        """
        Freeze the bundle and return its files as a read-only mapping.

        Lets callers serve or compress the files their own way.
        """
        self._freeze()
        return MappingProxyType(dict(self._files))

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"{type(self).__name__}(mime_type={self._mime_type!r}, files={len(self._files)}, {state})"
