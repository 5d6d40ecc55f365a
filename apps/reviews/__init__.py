"""Guest reviews and property rating aggregation."""
