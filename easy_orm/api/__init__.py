"""
Development backend for easy_orm.

In-memory REST collections served with FastAPI.
"""
