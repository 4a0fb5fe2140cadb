from enum import Enum

class ProposalStatus(str, Enum):
    CREATED = "Created"
    PENDING_APPROVAL = "Pending Approval"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    ACTIVE = "Active"
    EXPIRED = "Expired"
    CLOSED = "Closed"

class ProposalAction(str, Enum):
    EDIT = "edit"
    DELETE = "delete"
    SUBMIT = "submit"
    ACTIVATE = "activate"
    CLOSE = "close"

class OrderStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"

class PercentConvention(str, Enum):
    FRACTION = "fraction"  # 0.10 == 10%
    PERCENT = "percent"    # 10 == 10%
    AUTO = "auto"          # > 1 means percent, otherwise fraction

class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
