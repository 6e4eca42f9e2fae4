"""HTTP API for the Fitness Coach."""
