"""Fixed-width on-disk names and destination naming."""

from __future__ import annotations

from dataclasses import dataclass

NAME_ENCODING = "latin-1"

# Characters that must not leak into a host path component
_UNSAFE_CHARS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class FixedName:
    """A space-padded fixed-width name field, kept as the raw bytes read from disk.

    Trailing ASCII spaces are padding; trailing NULs are not and survive trimming.
    """

    raw: bytes

    def text(self) -> str:
        return self.raw.decode(NAME_ENCODING)

    def trimmed(self) -> str:
        return self.raw.rstrip(b" ").decode(NAME_ENCODING)

    def is_blank(self) -> bool:
        return not self.raw.strip(b" \x00")

    @classmethod
    def pad(cls, text: str, width: int) -> FixedName:
        """Encode text into a space-padded field of the given width."""
        encoded = text.encode(NAME_ENCODING)
        if len(encoded) > width:
            raise ValueError(f"Name '{text}' does not fit in {width} bytes")
        return cls(encoded.ljust(width, b" "))

    def __str__(self) -> str:
        return self.trimmed()


def safe_component(name: str) -> str:
    """Make a single host path component out of an on-disk name."""
    for char in _UNSAFE_CHARS:
        name = name.replace(char, "_")
    if name in (".", ".."):
        return "_" * len(name)
    return name


def display_name(stem: FixedName, extension: FixedName) -> str:
    """Name as shown in the listing: trimmed stem and trimmed extension."""
    ext = extension.trimmed()
    return f"{stem.trimmed()}.{ext}" if ext else stem.trimmed()


def destination_for(catalogue: str, stem: FixedName, extension: FixedName) -> str:
    """Virtual output path ``catalogue/stem.ext``.

    The stem loses its padding; the extension is kept verbatim. Files of the
    empty-name root catalogue land directly under the output root.
    """
    filename = safe_component(f"{stem.trimmed()}.{extension.text()}")
    if not catalogue:
        return filename
    return f"{safe_component(catalogue)}/{filename}"
