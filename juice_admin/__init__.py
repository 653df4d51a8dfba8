"""
juice_admin: noyau session et validation de la console d'administration
Price of Juice.
"""

from .console import AdminConsole

__version__ = "1.0.0"

__all__ = ["AdminConsole", "__version__"]
