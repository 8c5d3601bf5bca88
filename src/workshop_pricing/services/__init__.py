"""Services - rules administration and checkout."""
