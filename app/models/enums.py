"""
Persisted enumerations. Values are stored verbatim in String columns.
"""
from enum import Enum


class TripStatus(str, Enum):
    PENDING = "PENDING"
    ON_HOLD = "ON_HOLD"
    INPROGRESS = "INPROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TripType(str, Enum):
    VIPTRIP = "VIPTRIP"
    BASICTRIP = "BASICTRIP"


class TripCancelationReason(str, Enum):
    PICK_UP_OTHERS = "PICK_UP_OTHERS"  # driver picked up another passenger; no penalty
    CHANGE_OF_PLANS = "CHANGE_OF_PLANS"
    LONG_WAITING = "LONG_WAITING"
    WRONG_LOCATION = "WRONG_LOCATION"
    EMERGENCY = "EMERGENCY"
    OTHER = "OTHER"


class CanceledBy(str, Enum):
    PASSENGER = "PASSENGER"
    DRIVER = "DRIVER"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    WALLET = "WALLET"
    CARD = "CARD"


class PassengerTripStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    ANY = "ANY"


class TransactionType(str, Enum):
    DEBT_UNPAID = "DEBT_UNPAID"
    USER_DEBT = "USER_DEBT"
    USER_APP_SHARE = "USER_APP_SHARE"
    COMPLETE_TRIP = "COMPLETE_TRIP"
    APP_SHARE = "APP_SHARE"
    CANCELATION_REFUND = "CANCELATION_REFUND"
    CANCELATION_PENALTY = "CANCELATION_PENALTY"
    CANCELATION_COMPENSATION = "CANCELATION_COMPENSATION"
