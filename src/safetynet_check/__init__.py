"""SafetyNet attestation statement verification."""

__version__ = "1.0.0"
