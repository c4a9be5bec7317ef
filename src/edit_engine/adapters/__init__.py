"""Host bridges for UI toolkits."""
