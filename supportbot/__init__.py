"""
SupportBot: Knowledge-Grounded Support Chat Core

Retrieval and streaming core for a product-support assistant:
- Knowledge: lexical or vector retrieval over a fixed article collection
- Context: bounded prompt fragments built from the top-ranked articles
- Relay: incremental decoding of a streamed answer from a model endpoint

Copyright (c) 2024 SupportBot Contributors
"""

__version__ = "0.1.0"
__author__ = "SupportBot Team"
