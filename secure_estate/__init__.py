"""
Secure Estate - Digital estate management with well-being escalation.

Users catalog their assets and designate nominees. A periodic well-being
check-in keeps the account in good standing; missed check-ins raise alerts
and, once the alert ceiling is reached, every nominee is notified exactly
once per breach.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
