"""gormlint — static checker for GORM struct tags."""

__version__ = "0.3.0"
