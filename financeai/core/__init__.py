"""
Core utilities shared across the FinanceAI API.

Configuration (env vars, feature flags), logging setup and password hashing
live here so routers and services do not read os.environ or configure
handlers themselves.
"""
