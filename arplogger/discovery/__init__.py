"""
Discovery package: per-interface workers and the service that runs them.
"""
