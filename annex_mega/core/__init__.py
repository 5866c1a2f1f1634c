"""Core building blocks: address algebra and progress reporting."""
