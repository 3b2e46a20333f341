"""
High-level use cases for the FinanceAI API.

Each service orchestrates the repository and the AI content client; routers
call services instead of touching storage directly.
"""
