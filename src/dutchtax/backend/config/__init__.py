"""YAML-backed configuration for the Box 1 calculator."""
