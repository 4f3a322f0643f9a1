"""
Sandcraft - normalizes LLM code-generation output into runnable Sandpack React projects
"""

__version__ = "1.0.0"
