"""Business logic services.

Services contain the queries and are called by routes.
They accept their dependencies (database client, cache) explicitly.
"""
