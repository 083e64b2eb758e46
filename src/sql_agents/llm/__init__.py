"""
Model gateway for the local model-serving endpoint.
"""

from .ollama_client import ModelResponseError, OllamaChatClient

__all__ = ["ModelResponseError", "OllamaChatClient"]
