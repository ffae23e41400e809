"""
Studies: Structured experiments for understanding.

Each study begins with observation, not hypothesis.

Study progression:
1. Light seeking - how stable is a group drawn toward one light?
"""
