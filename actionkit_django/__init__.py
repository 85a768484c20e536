"""Django host for actionkit: admin actions, JSON views and management commands."""
