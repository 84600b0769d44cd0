"""Data layer - schemas shared by storage, statistics and the API."""
