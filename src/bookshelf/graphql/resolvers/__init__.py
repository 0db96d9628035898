"""Resolver package for the GraphQL schema.

Query, mutation and field resolvers live in sibling modules and are imported
lazily by the types that reference them.
"""
