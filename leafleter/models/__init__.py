from .street import Interval, Street
from .note import AddressNote, StreetNote
from .sector import Sector

__all__ = ["Interval", "Street", "AddressNote", "StreetNote", "Sector"]
