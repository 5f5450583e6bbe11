"""API routers for the Incident Reviewer."""
