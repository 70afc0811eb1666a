"""Building blocks for YAML-described reconnaissance workflows: models, templates, targets, validation, readers, reports and updates."""

__version__ = "0.1.0"