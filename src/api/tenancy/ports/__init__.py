"""Ports (interfaces and domain exceptions) for the tenancy bounded context."""
