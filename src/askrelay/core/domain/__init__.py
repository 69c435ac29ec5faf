"""Domain models, enums and errors for askrelay."""
