"""
minilm_embed: 384-dimensional sentence embeddings with all-MiniLM-L6-v2.
"""

__version__ = "0.1.0"
