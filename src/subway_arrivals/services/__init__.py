"""Feed decoding services."""
