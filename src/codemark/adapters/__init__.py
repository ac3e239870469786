"""Host integrations for the decoration engine."""
