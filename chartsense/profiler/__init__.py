"""Column role scoring, relevance ranking and chart recommendation."""
