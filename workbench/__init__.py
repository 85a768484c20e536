"""Demo Django project exposing actions on every surface."""
