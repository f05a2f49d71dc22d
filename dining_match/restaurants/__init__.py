"""
Restaurant records, the in-memory store and the search engine.
"""
