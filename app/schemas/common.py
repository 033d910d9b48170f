def reject_null(v):
    """Partial updates may leave a field out, but not null a column that must hold a value."""
    if v is None:
        raise ValueError("may not be null")
    return v
