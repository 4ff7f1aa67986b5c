"""Infrastructure adapters (database engine, SQLModel repositories)."""
