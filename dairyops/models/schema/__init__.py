from dairyops.models.schema.user import User
from dairyops.models.schema.cattle import Cattle, Calf
from dairyops.models.schema.milk import MilkRecord
from dairyops.models.schema.feed import FeedConsumption, FeedStock, FeedStockHistory
from dairyops.models.schema.health import Checkup, Vaccination
from dairyops.models.schema.staff import Role, RoleModuleAccess, Employee

__all__ = [
    "User",
    "Cattle",
    "Calf",
    "MilkRecord",
    "FeedConsumption",
    "FeedStock",
    "FeedStockHistory",
    "Checkup",
    "Vaccination",
    "Role",
    "RoleModuleAccess",
    "Employee",
]
