from app.models.basic_trip import BasicTrip, BasicTripPassenger
from app.models.cancelation import Cancelation
from app.models.offer import Offer
from app.models.recent_address import RecentAddress
from app.models.trip import Trip
from app.models.user import User, UserFcmToken
from app.models.vehicle import Vehicle, VehicleClass, VehicleColor, VehicleName, VehicleType
from app.models.vip_trip import VipTrip
from app.models.wallet import DriverWalletTransaction, PassengerWalletTransaction

__all__ = [
    "BasicTrip",
    "BasicTripPassenger",
    "Cancelation",
    "DriverWalletTransaction",
    "Offer",
    "PassengerWalletTransaction",
    "RecentAddress",
    "Trip",
    "User",
    "UserFcmToken",
    "Vehicle",
    "VehicleClass",
    "VehicleColor",
    "VehicleName",
    "VehicleType",
    "VipTrip",
]
