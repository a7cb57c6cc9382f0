"""
Notificaciones de matches excelentes.
"""

from sdamatch.notifications.notifier import MatchNotifier, group_excellent_matches

__all__ = [
    "MatchNotifier",
    "group_excellent_matches",
]
