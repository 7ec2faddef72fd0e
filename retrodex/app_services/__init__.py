"""
Service layer: validation and normalization of submissions, multi-step
writes and the public read model built on top of the repositories.
"""
