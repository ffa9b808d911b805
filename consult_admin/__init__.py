"""
Consult Admin - user and role administration for the consulting back office.
"""

__version__ = "0.1.0"
