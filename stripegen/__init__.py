"""Generate Rust client types and request functions from Stripe's OpenAPI spec."""

__version__ = "0.1.0"
