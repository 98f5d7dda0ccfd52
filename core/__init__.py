# =============================================================================
# core/__init__.py
# =============================================================================
# The Shortcut search-query compiler and the thin pieces around it.
#
#   catalog.py   which filters exist and how each one is encoded
#   encoders.py  one serializer per value kind
#   resolver.py  resolving "me" to the acting member
#   compiler.py  parameters → query string
#
#   shortcut_client.py, search.py, formatting.py run the compiled query and
#   render results for the tool layer.
#
# Nothing in this package imports FastMCP or Google ADK.
# =============================================================================
