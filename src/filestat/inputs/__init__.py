# Inputs - Probe plugins and their registry

from .base import Accumulator, Input
from .filestat import FileStat, GatherError, Observation
from . import registry

registry.add("filestat", FileStat)

__all__ = ["Accumulator", "Input", "FileStat", "GatherError", "Observation", "registry"]
