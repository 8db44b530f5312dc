# assets.py
# Images bundled with sitepilot and used by every generated site.

from __future__ import annotations

import base64
from dataclasses import dataclass
from importlib.resources import files
from typing import BinaryIO, Callable, Optional

FAVICON = "images/favicon.png"
LOGO = "images/logo.svg"


@dataclass
class ResourceNotFound(Exception):
    """A bundled asset is missing from the installed package."""
    resource: str

    def __str__(self) -> str:
        return f"bundled resource not found: {self.resource}"


def _open(resource: str) -> BinaryIO:
    path = files("sitepilot").joinpath("static", *resource.split("/"))
    if not path.is_file():
        raise ResourceNotFound(resource)
    return path.open("rb")


def open_favicon() -> BinaryIO:
    """Open the bundled favicon. The caller owns (and closes) the stream."""
    return _open(FAVICON)


def encode_logo(opener: Optional[Callable[[], BinaryIO]] = None) -> str:
    """Base64 of the bundled SVG logo."""
    src = opener() if opener is not None else _open(LOGO)
    try:
        return base64.b64encode(src.read()).decode("ascii")
    finally:
        src.close()


def logo_data_uri(opener: Optional[Callable[[], BinaryIO]] = None) -> str:
    return f"data:image/svg+xml;base64,{encode_logo(opener)}"
