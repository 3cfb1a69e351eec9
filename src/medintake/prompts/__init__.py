"""Prompt templates sent to the answer-extraction model."""
