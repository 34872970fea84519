from models.dining_tables import DiningTable

__all__ = [
    "DiningTable",
]
