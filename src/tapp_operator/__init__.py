"""TApp hash operator: pod template fingerprints for drift detection."""

__version__ = "0.1.0"
