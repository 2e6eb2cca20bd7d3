"""Raw content source as produced by the loader."""

import hashlib
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RawSource:
    """A discovered content file before parsing.

    Attributes:
        path: POSIX path relative to the content root, unique within the corpus
        raw_text: Full file contents
    """

    path: str
    raw_text: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.raw_text.encode("utf-8")).hexdigest()
