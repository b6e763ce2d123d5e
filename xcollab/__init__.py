# xcollab/__init__.py
"""
XCollab: hackathon catalogue with LLM-assisted project ideas, proposal
drafting and team matching.

Usage (development):
    python -m uvicorn xcollab.main:app --reload

Install in editable mode for a reliable import path during auto-reload:
    pip install -e .
"""
