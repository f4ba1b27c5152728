"""OutcomeTracker portal backend (records, sessions, sign-up)."""
