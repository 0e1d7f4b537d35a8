"""
AI components for the Shop Advisor core.

Contains prompt templates for LLM-backed workflows:
- recommendation: catalog ranking prompts for Gemini
"""
