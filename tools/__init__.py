# =============================================================================
# tools/__init__.py
# =============================================================================
# FastMCP tool wrappers.  Each tool collects its typed arguments, calls a
# function in core/search.py, and returns a dict: {"result": ...} on success,
# {"error": ..., "field": ...} when the filters could not be compiled.
# =============================================================================
