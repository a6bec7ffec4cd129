"""Repository implementations live here.

Each module registers its classes with `@modmaven.repo.repository(...)`; the
driver imports every module in this package to find them.
"""
