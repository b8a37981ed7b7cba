"""Output layer — rendering Outcomes and job listings for the CLI."""
