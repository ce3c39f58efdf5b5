"""Post store adapters.

Services depend on ``AbstractPostStore``; ``create_post_store`` picks the
backing (SQLite file or process memory) from configuration.
"""
