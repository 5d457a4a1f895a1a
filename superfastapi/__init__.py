"""superfastapi -- scaffold FastAPI projects with optional Supabase, PostgreSQL and Docker."""

__version__ = "1.0.0"
