"""Padring configuration (placement list) reading."""

from .reader import ConfigReader, load_config

__all__ = [
    "ConfigReader",
    "load_config",
]
