"""flexprice — terminal client for the FlexPrice usage-based billing platform."""

__version__ = "0.1.0"
