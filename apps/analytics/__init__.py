"""Team-level analytics queries and performance grading."""
