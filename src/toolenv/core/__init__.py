"""Core utilities shared across toolenv: logging, errors and templating."""
