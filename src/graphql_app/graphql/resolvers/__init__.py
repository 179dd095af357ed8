"""Resolver package for the GraphQL schema.

Field types defer to these functions so that database access stays out of the
type definitions.
"""
