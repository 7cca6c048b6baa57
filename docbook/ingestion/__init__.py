"""Book ingestion: conversion, normalization and segmentation."""

from docbook.ingestion.converter import ConversionResult, DocxConverter
from docbook.ingestion.normalizer import html_to_model, model_to_html
from docbook.ingestion.parser import BookParser
from docbook.ingestion.segmenter import segment

__all__ = [
    "BookParser",
    "ConversionResult",
    "DocxConverter",
    "html_to_model",
    "model_to_html",
    "segment",
]
