import enum


class OrderStatus(str, enum.Enum):
    pending = "PENDING"
    validated = "VALIDATED"
    delivered = "DELIVERED"


class MovementType(str, enum.Enum):
    inbound = "IN"
    outbound = "OUT"
