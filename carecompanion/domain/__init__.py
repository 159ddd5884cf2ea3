"""Domain models: stored records, input boundary models and read-only views."""
