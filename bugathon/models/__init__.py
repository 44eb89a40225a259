from .ticket import Ticket
from .user_score import UserScore
from .daily_stat import DailyStat
from .achievement import Achievement

__all__ = [
    "Ticket",
    "UserScore",
    "DailyStat",
    "Achievement",
]
