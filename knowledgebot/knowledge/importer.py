"""Import text documents into the knowledge base."""

import logging
from pathlib import Path

from knowledgebot.knowledge.models import KnowledgeItem, SourceKind
from knowledgebot.knowledge.store import KnowledgeStore

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".txt", ".md", ".json"})


class FileTypeMismatchError(ValueError):
    """Raised when a file's actual content does not match its declared extension."""


# (magic_bytes, human_readable_name) for binary formats commonly renamed to .txt
_BINARY_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\xff\xd8\xff",                     "JPEG image"),
    (b"\x89PNG\r\n\x1a\n",               "PNG image"),
    (b"GIF87a",                           "GIF image"),
    (b"GIF89a",                           "GIF image"),
    (b"RIFF",                             "RIFF container (WebP/AVI/WAV)"),
    (b"%PDF",                             "PDF document"),
    (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "OLE2 document (.doc/.xls/.ppt)"),
    (b"PK\x03\x04",                      "ZIP/Open-XML document (.docx/.xlsx/…)"),
    (b"\x1a\x45\xdf\xa3",                "MKV/WebM video"),
]


def read_text_file(path: Path) -> str:
    """Return the UTF-8 text of *path* after checking it really is text.

    Raises
    ------
    ValueError
        If the extension is not one of ``SUPPORTED_EXTENSIONS``.
    FileTypeMismatchError
        If the content starts with a known binary signature or is not
        valid UTF-8.
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {suffix or path.name}")

    data = path.read_bytes()
    for magic, type_name in _BINARY_SIGNATURES:
        if data.startswith(magic):
            raise FileTypeMismatchError(
                f"'{path.name}': extension is '{suffix}' "
                f"but file content is {type_name}"
            )
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise FileTypeMismatchError(
            f"'{path.name}': extension is '{suffix}' "
            f"but file contains non-UTF-8 binary data"
        )


def import_file(store: KnowledgeStore, path: Path) -> KnowledgeItem:
    """Add a document to *store*, titled with its file name."""
    content = read_text_file(path)
    return store.add(title=path.name, content=content, kind=SourceKind.FILE)


def import_directory(
    store: KnowledgeStore,
    dir_path: Path,
) -> tuple[list[KnowledgeItem], list[tuple[Path, str]]]:
    """Import every supported file under *dir_path*.

    Files that fail validation are skipped and reported in the returned
    error list so one bad file does not abort the whole batch.

    Returns
    -------
    items : list[KnowledgeItem]
        The items that were added.
    errors : list[tuple[Path, str]]
        One entry per skipped file: (file_path, human-readable reason).
    """
    items: list[KnowledgeItem] = []
    errors: list[tuple[Path, str]] = []

    for f in sorted(dir_path.rglob("*")):
        if not (f.is_file() and f.suffix.lower() in SUPPORTED_EXTENSIONS):
            continue
        try:
            items.append(import_file(store, f))
        except (OSError, ValueError) as e:
            logger.warning("Skipped %s: %s", f, e)
            errors.append((f, str(e)))

    return items, errors
