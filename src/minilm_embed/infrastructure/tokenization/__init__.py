from .huggingface import HuggingFaceTokenizer

__all__ = ["HuggingFaceTokenizer"]
