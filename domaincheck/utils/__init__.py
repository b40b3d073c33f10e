from .cache import AvailabilityCache
from .inflight import InFlightRegistry

__all__ = ['AvailabilityCache', 'InFlightRegistry']
