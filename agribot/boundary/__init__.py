"""
Boundary layer: adapters to storage, search and language-model providers.
"""
