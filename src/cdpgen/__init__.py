"""cdpgen: typed bindings compiler for DevTools-style protocol schemas."""

__version__ = "0.3.0"
