"""
Model loader: reads a template folder into a ``path -> bytes`` mapping.
"""
import re
from pathlib import Path
from typing import Dict, Union

from walletpass.core import messages
from walletpass.core.constants import MODEL_EXTENSION
from walletpass.core.errors import ModelNotFoundError
from walletpass.utils.logging import get_logger

logger = get_logger(__name__)

_GENERATED = re.compile(r"(manifest|signature)", re.IGNORECASE)


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ModelNotFoundError(messages.format(messages.MODELS_FILE_NO_OPEN, exc)) from exc


def get_model_folder_contents(model: Union[str, Path]) -> Dict[str, bytes]:
    """
    Read a template folder.

    ``.pass`` is appended to the path when it has no extension. Root
    entries are kept only when they are visible, have an extension and
    are not a manifest or signature; sub-directories (e.g. ``en.lproj``)
    are read one level deep and keyed ``dir/file``.

    Raises:
        ModelNotFoundError: If the folder or one of its files cannot be read
    """
    model_path = Path(model)
    if not model_path.suffix:
        model_path = model_path.with_name(model_path.name + MODEL_EXTENSION)

    if not model_path.is_dir():
        raise ModelNotFoundError(messages.format(messages.MODELS_DIR_NOT_FOUND, model_path))

    contents: Dict[str, bytes] = {}
    for entry in sorted(model_path.iterdir()):
        if _is_hidden(entry) or _GENERATED.search(entry.name) or not entry.suffix:
            continue

        if entry.is_dir():
            for child in sorted(entry.iterdir()):
                if _is_hidden(child) or not child.is_file():
                    continue
                contents[f"{entry.name}/{child.name}"] = _read(child)
            continue

        contents[entry.name] = _read(entry)

    logger.debug("model_loaded", model=str(model_path), files=len(contents))
    return contents
