from photovault.api.routes.check_routes import router as check_router
from photovault.api.routes.albums_router import router as albums_router
from photovault.api.routes.photos_routes import router as photos_router
from photovault.api.routes.bin_router import router as bin_router
from photovault.api.routes.favorites_router import router as favorites_router
from photovault.api.routes.gallery_router import router as gallery_router
from photovault.api.routes.live_router import router as live_router
