"""Application services for the tenancy bounded context."""
