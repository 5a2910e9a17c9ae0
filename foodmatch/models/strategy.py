from enum import Enum

class Strategy(str, Enum):
    """How distance and urgency combine into a priority score."""
    DISTANCE = "distance"
    URGENCY = "urgency"
    BALANCED = "balanced"
