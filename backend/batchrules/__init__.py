"""Stage-transition and batch validation rules for cannabis and produce cultivation."""

__version__ = "0.1.0"
