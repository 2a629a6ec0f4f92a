"""
Configuration module.

Default parameters, YAML run configuration loading with layered
precedence, and validation of merged run configurations.
"""
