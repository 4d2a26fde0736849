from .sentence_transformers import SentenceTransformerEngine

__all__ = ["SentenceTransformerEngine"]
