"""Content sources, scorers and the political-leaning categorizer."""
