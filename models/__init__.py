
"""
models/__init__.py
------------------
Expose unified inference interface.
"""

from .text_encoder import embed_text, batch_embed_texts, text_model
from .category_classifier import classify_categories, classifier

__all__ = ["embed_text", "batch_embed_texts", "classify_categories", "text_model", "classifier"]
