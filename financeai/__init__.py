"""FinanceAI: content and AI-calculator backend for Indian retail investors."""

__version__ = "1.0.0"
