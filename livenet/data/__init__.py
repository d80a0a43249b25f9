"""Dataset loaders for LiveNet."""

from .csv_loader import load_csv_dataset
from .synthetic import make_blobs, make_xor

__all__ = ["load_csv_dataset", "make_blobs", "make_xor"]
