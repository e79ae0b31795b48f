"""Reciters API: data access for reciters and their graded results."""
