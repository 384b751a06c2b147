from enum import Enum


class CattleType(str, Enum):
    COW = "COW"
    BUFFALO = "BUFFALO"
    GOAT = "GOAT"


class CattleBreed(str, Enum):
    KANGAYAM = "KANGAYAM"
    KARAMPASU = "KARAMPASU"
    HOLSTEIN = "HOLSTEIN"
    JERSEY = "JERSEY"
    GIR = "GIR"
    SAHIWAL = "SAHIWAL"
    MURRAH = "MURRAH"
    JAMUNAPARI = "JAMUNAPARI"


class HealthStatus(str, Enum):
    HEALTHY = "HEALTHY"
    INJURED = "INJURED"


class MilkGrade(str, Enum):
    A1 = "A1"
    A2 = "A2"
    OneCowA1 = "OneCowA1"
    OneCowA2 = "OneCowA2"


class FeedSession(str, Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"


class Unit(str, Enum):
    KG = "KG"
    Litres = "Litres"


class FeedType(str, Enum):
    WATER = "WATER"
    FEED = "FEED"


class StockChange(str, Enum):
    Added = "Added"
    Consumed = "Consumed"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class InseminationType(str, Enum):
    NATURAL_SERVICE = "NATURAL_SERVICE"
    ARTIFICIAL_INSEMINATION = "ARTIFICIAL_INSEMINATION"


class ParentOrigin(str, Enum):
    FARM_BORN = "FARM_BORN"
    FARM_OWNED = "FARM_OWNED"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class FarmModule(str, Enum):
    CATTLE = "Cattle Management"
    MILK = "Milk Production"
    FEED = "Feed Management"
    HEALTH = "Health Management"
    EMPLOYEE = "Employee Management"


class MilkDashboardSession(str, Enum):
    TODAY = "Today"
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"


class MilkReportSession(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    OVERALL = "Overall"
