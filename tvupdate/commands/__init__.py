"""
Commands module for tvupdate CLI
"""

from .latest_command import latest_command, listing_filter, search_command
from .list_command import list_command
from .show_command import add_episode, show_command
from .test_command import test_command
from .update_handler import print_report, print_summary, update_all, update_show

__all__ = [
    "add_episode",
    "latest_command",
    "list_command",
    "listing_filter",
    "print_report",
    "print_summary",
    "search_command",
    "show_command",
    "test_command",
    "update_all",
    "update_show",
]
