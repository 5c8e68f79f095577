"""Click commands for the mirror."""
