from photovault.enums.formats_image_enum import FormatImage
from photovault.enums.export_policy_enum import ExportPolicy
from photovault.enums.reserved_albums_enum import ReservedAlbum
