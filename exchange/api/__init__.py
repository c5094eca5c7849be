"""HTTP API for reading exchange state and pricing trades."""
