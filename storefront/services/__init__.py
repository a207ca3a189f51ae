"""Domain services: money utilities and checkout totals."""
