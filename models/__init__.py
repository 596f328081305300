from .member import Member, MemberAuth
from .quotes_daily import QuotesDaily, GoldPrediction
from .simulation_history import SimulationHistory

__all__ = ['Member', 'MemberAuth', 'QuotesDaily', 'GoldPrediction', 'SimulationHistory']
