"""
Example consumer of core.tracking: a user entity, its persistence record
and the mapper between them.
"""
