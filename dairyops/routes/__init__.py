from dairyops.routes.auth import router as auth_router
from dairyops.routes.cattle import router as cattle_router
from dairyops.routes.feed import router as feed_router
from dairyops.routes.feed import stock_router as feed_stock_router
from dairyops.routes.health import checkup_router, vaccination_router
from dairyops.routes.milk import router as milk_router
from dairyops.routes.staff import router as staff_router

__all__ = [
    "auth_router",
    "cattle_router",
    "milk_router",
    "feed_router",
    "feed_stock_router",
    "checkup_router",
    "vaccination_router",
    "staff_router",
]
