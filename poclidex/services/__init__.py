"""Session state, resolvers and catalog services."""
