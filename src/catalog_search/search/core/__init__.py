"""Core query construction: text queries, pagination and sorting."""
