"""
weapon_value - weapon DPS and value evaluation for PoE2 trade listings.
"""

__version__ = "0.1.0"
