"""Configuration, constants, errors, logging and terminal output."""
