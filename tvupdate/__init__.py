"""
tvupdate - Keep tracked EZTV shows downloaded through Transmission
"""

__version__ = "0.1.0"
