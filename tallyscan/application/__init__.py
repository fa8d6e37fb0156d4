"""Application workflows built on the receipt pipeline."""
