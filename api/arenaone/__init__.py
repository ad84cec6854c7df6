"""ArenaOne court and coach availability engine."""
