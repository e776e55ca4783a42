"""
AI Orchestrator Module - expert commentary on weld passes.

Builds deterministic analysis prompts and sends them to an
OpenAI-compatible text-generation service.
"""

from .llm_client import LLMClient, analyze_with_llm
from .prompts import build_analysis_prompt

__all__ = ["LLMClient", "analyze_with_llm", "build_analysis_prompt"]
