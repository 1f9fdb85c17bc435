"""Ports (repository protocols and domain exceptions) for IAM."""
