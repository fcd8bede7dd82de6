"""Infrastructure layer — reflection document loading, encoding, schema sources.

Infrastructure may import from domain and config.
It must never import from services, commands, or output.
"""
