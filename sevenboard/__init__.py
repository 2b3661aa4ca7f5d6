"""
SevenBoard - gestão de solicitações de marketing.
"""

__version__ = "1.0.0"
