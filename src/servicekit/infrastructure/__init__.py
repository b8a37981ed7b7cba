"""Infrastructure layer — persistence for the database job queue."""
