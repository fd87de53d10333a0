from .relay import BroadcastRelay

__all__ = ["BroadcastRelay"]
