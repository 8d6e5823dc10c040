"""Study-aid MCP server — TNPSC study notes and quizzes from Gemini."""

__version__ = "0.1.0"
