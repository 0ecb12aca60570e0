"""
Infrastructure layer - everything that touches files or external services.

- knowledge: Reading the bundled knowledge dataset
- backend: Workout backend implementations

These wrappers translate between external formats and our domain models.
"""
