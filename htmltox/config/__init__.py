"""Configuration: environment settings and YAML presets."""
