"""Resolver package for the GraphQL schema.

Resolvers pull the caller identity, the store and the token adapter from
``info.context``, which the router's context getter fills once per request.
"""
