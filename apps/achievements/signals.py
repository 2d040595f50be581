"""
Achievement signals.

``achievement_unlocked`` is the user-visible notification hook. It is sent
with ``user_achievement`` once the unlock row is stored.
"""

from django.dispatch import Signal


achievement_unlocked = Signal()
