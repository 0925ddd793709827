"""
Image formats and file extensions.

Format names follow Pillow's registry ("JPEG", "PNG", ...); lookups are
case-insensitive and "jpg"/"jpeg" both resolve to "JPEG".
"""
from pathlib import Path
from typing import List, Optional, Set, Union

from PIL import Image

IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp', '.tiff', '.tif',
}

PREFERRED_EXTENSIONS = {
    'JPEG': '.jpg',
    'PNG': '.png',
    'GIF': '.gif',
    'BMP': '.bmp',
    'TIFF': '.tif',
    'WEBP': '.webp',
}


def is_image(path) -> bool:
    """Check if path has an image file extension."""
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def get_extension(path: Union[str, Path]) -> Optional[str]:
    """
    Extension of the file name without the dot.

    Returns None when the name has no dot or ends with one.
    """
    name = Path(path).name
    if '.' not in name or name.endswith('.'):
        return None
    return name.rsplit('.', 1)[1]


def canonical_format(name: Optional[str]) -> Optional[str]:
    """Resolve a format or extension name to Pillow's canonical format name."""
    if not name:
        return None
    registered = Image.registered_extensions()
    key = name.lower().lstrip('.')
    if f".{key}" in registered:
        return registered[f".{key}"]
    upper = key.upper()
    if upper in Image.SAVE or upper in Image.OPEN:
        return upper
    return None


def supported_output_formats() -> List[str]:
    """Formats Pillow can write."""
    Image.init()
    return sorted(Image.SAVE)


def is_supported_output_format(name: Optional[str]) -> bool:
    fmt = canonical_format(name)
    return fmt is not None and fmt in supported_output_formats()


def extensions_for_format(format_name: str) -> Set[str]:
    """All registered extensions (with dot, lowercase) for a format."""
    fmt = canonical_format(format_name)
    if fmt is None:
        return set()
    return {ext for ext, owner in Image.registered_extensions().items() if owner == fmt}


def preferred_extension(format_name: str) -> Optional[str]:
    fmt = canonical_format(format_name)
    if fmt is None:
        return None
    if fmt in PREFERRED_EXTENSIONS:
        return PREFERRED_EXTENSIONS[fmt]
    extensions = sorted(extensions_for_format(fmt))
    return extensions[0] if extensions else f".{fmt.lower()}"


def format_from_path(path: Union[str, Path]) -> Optional[str]:
    """Format implied by the file extension, or None if unknown."""
    extension = get_extension(path)
    if extension is None:
        return None
    return Image.registered_extensions().get(f".{extension.lower()}")


def extension_matches_format(path: Union[str, Path], format_name: str) -> bool:
    extension = get_extension(path)
    if extension is None:
        return False
    return f".{extension.lower()}" in extensions_for_format(format_name)
