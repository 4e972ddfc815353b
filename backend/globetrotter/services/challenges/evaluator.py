def is_correct(submitted: str, canonical: str) -> bool:
    """Exact match modulo simple (per-character) case mapping. No trimming and no fuzzy matching."""
    if submitted is None or canonical is None:
        return False
    return submitted.lower() == canonical.lower()
