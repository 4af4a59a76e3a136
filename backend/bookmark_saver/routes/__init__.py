# Routes package init
"""
Bookmark Saver Backend — API Routes Package
============================================

Route Inventory (relative to settings.api_prefix):
    - bookmarks.py:  GET  /bookmarks             (list with tag/collection/search filters)
                     POST /bookmarks             (create)
                     GET  /bookmarks/tags        (tag usage counts)
                     GET  /bookmarks/{id}        (single bookmark)
    - health.py:     GET  /health                (liveness + store ping)

Routes stay thin: extract request data, call the service, return the model.
Business rules live in services/bookmark_service.py.
"""
