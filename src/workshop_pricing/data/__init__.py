"""Data access - CSV-backed repositories for rules and workshops."""
