from photovault.schemas.album_schemas import (
    AlbumResponse,
    AlbumListResponse,
    AlbumCreate,
    AlbumUpdate,
    AlbumCoverUpdate
)
from photovault.schemas.photos_schemas import (
    PhotoResponse,
    PhotoResponseList,
    PhotoBulkAction,
    PhotoMoveAction,
    FavoriteUpdate,
    ExportRequest,
    OperationResult
)
from photovault.schemas.import_schemas import ImportResult, ImportItemOutcome, ImportRequest
from photovault.schemas.source_schemas import (
    SourcePhoto,
    SourcePhotoList,
    DeletionSuccess,
    DeletionFailed,
    DeletionPermissionRequired,
    OriginalsDeletionResult,
    RemoveOriginalsRequest,
    PermissionGrant
)
