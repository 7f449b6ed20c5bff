"""Testing utilities for torchlapack."""
