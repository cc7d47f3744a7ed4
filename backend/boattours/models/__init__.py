from .generated import Base, BlackoutIntervals, Bookings, Vessels

__all__ = ["Base", "Vessels", "Bookings", "BlackoutIntervals"]
