"""
Miscellaneous utilities
"""

import logging


def setup_logging(log_level: str = "INFO"):
    """Configure logging system"""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_episode_info(show_title: str, season: int, episode: int, title: str) -> str:
    """Format episode information for display"""
    return f"{show_title} - S{season:02d}E{episode:02d} - {title}"


def format_size(size_bytes: int) -> str:
    """Human readable size"""
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.2f} GB"
    if size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.2f} MB"
    if size_bytes >= 1024:
        return f"{size_bytes / 1024:.2f} KB"
    if size_bytes > 0:
        return f"{size_bytes} B"
    return "-"
