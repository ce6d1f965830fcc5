import enum

class InwardType(str, enum.Enum):
    supply = "SUPPLY"
    returned = "RETURN"

class OutwardStatus(str, enum.Enum):
    open = "OPEN"
    closed = "CLOSED"

class LedgerKind(str, enum.Enum):
    inward = "INW"
    outward = "OUT"
    transfer = "TRF"
