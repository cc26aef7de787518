# Runtime - Drives input plugins on an interval

from .collector import gather_loop, gather_once

__all__ = ["gather_loop", "gather_once"]
