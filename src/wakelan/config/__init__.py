"""Config file loading and writing."""
