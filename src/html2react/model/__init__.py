"""Data records shared by the pipeline stages."""
