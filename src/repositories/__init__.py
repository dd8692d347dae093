"""Clients for the store API and AWS Secrets Manager."""
