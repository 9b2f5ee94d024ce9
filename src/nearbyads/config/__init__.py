"""Settings and packaged YAML configuration."""
