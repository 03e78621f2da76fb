"""HabitPal backend package."""
