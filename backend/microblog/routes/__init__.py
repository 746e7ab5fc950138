# Routes package init
"""
Microblog Backend: API Routes Package
========================================

Route Inventory:
    - posts.py:   POST   /posts              (create)
                  GET    /posts              (list all)
                  PUT    /posts/{post_id}    (merge update)
                  DELETE /posts/{post_id}    (hard delete)
    - health.py:  GET    /health             (MongoDB ping)

Routes stay thin: one repository call, a status code, one outcome log entry.
"""
