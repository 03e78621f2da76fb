"""Habit intent sources (conversation text -> structured habit requests)."""
