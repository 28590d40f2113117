# Routes package init
"""
KBlog Backend — API Routes Package
===================================

Route Inventory:
    - posts.py:     GET    /posts                 (list posts)
                    POST   /posts                 (create post)
                    GET    /posts/{id}            (get post)
                    DELETE /posts/{id}            (delete post)
                    GET    /posts/{id}/comments   (comments of a post)
    - comments.py:  GET    /comments              (list comments)
                    POST   /comments              (create comment)
                    GET    /comments/{id}         (get comment)
                    DELETE /comments/{id}         (delete comment)
    - health.py:    GET    /health                (service health check)

Design Principle:
    Routes are THIN. Each one extracts the path id or body, calls one
    BlogStore operation and returns the entity. Missing records are raised as
    NotFoundError and mapped to a status code by the handlers in main.py.
"""
