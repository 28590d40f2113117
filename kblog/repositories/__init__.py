# Repositories package init
"""
KBlog Backend — Repository Layer
=================================

What:  Authoritative storage for posts and comments.
Why:   Routes stay free of storage details; each repository owns its
       collection, its id counter and its lock.

Repository Inventory:
    - base.py:    Repository / RelationalRepository protocols (shared contract)
    - memory.py:  InMemoryRepository, ordered dict + counter per entity type
    - sql.py:     SqlRepository, SQLAlchemy-backed implementation
    - store.py:   BlogStore (posts + comments) and build_store(settings)

There is no implementation base class: both repository types satisfy the
protocols structurally and are composed into a BlogStore.
"""
