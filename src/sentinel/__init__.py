"""Sentinel: credential and authorization core for a multi-tenant identity provider."""
