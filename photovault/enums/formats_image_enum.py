from enum import StrEnum
from typing import List

class FormatImage(StrEnum):
    JPG = "JPG"
    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"
    GIF = "GIF"
    HEIC = "HEIC"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value

    @staticmethod
    def get_extensions_list() -> List[str]:
        return [f".{fmt.value.lower()}" for fmt in FormatImage]
