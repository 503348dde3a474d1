from photovault.services.storage_service import StorageService
from photovault.services.gallery_source import GallerySource, LocalGallerySource
from photovault.services.vault_service import VaultService
from photovault.services.query_service import QueryService, LiveQuery, Subscription
from photovault.services.vault_executor import VaultExecutor
