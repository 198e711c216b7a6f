"""Status enumerations shared by the ORM models and API schemas."""

import enum


class PondStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    MAINTENANCE = "MAINTENANCE"
    HARVESTING = "HARVESTING"
    PREPARING = "PREPARING"


class CycleStatus(str, enum.Enum):
    PLANNING = "PLANNING"
    STOCKING = "STOCKING"
    GROWING = "GROWING"
    HARVESTING = "HARVESTING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# A pond has at most one cycle in these states at a time
ACTIVE_CYCLE_STATUSES = (CycleStatus.GROWING, CycleStatus.STOCKING)
