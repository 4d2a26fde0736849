"""
Entry points: FastAPI application (``main``) and command line (``cli``).
"""
