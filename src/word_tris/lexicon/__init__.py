"""Dictionary services for Word Tris.

- Lexicon: partitioned corpus with lazy bucket loading and fuzzy lookups
- MemoryAssetLoader / JsonAssetLoader: asset sources for the Lexicon
- bucket_for: initial-consonant bucket of a word
"""

from .hangul import BUCKET_KEYS, OTHER_BUCKET, bucket_for, has_tense_initial
from .lexicon import Lexicon, matches_pattern
from .loaders import AssetLoader, JsonAssetLoader, MemoryAssetLoader

__all__ = [
    "AssetLoader",
    "BUCKET_KEYS",
    "JsonAssetLoader",
    "Lexicon",
    "MemoryAssetLoader",
    "OTHER_BUCKET",
    "bucket_for",
    "has_tense_initial",
    "matches_pattern",
]
