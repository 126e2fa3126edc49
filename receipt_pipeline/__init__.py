"""Receipt data extraction pipeline: OCR text in, normalized transaction fields out."""

__version__ = "1.0.0"
