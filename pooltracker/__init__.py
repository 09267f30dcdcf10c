"""Pool tournament tracker: round-robin schedules, winners and standings."""
