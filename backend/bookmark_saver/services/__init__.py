# Services package init
"""
Bookmark Saver Backend — Services Layer
========================================

What:  Business logic between routes (HTTP) and the document gateway.

Service Inventory:
    - BookmarkService: validation, filter building, create/list/lookup/tag counts

Services receive the gateway as an argument, so they can be unit-tested
with an AsyncMock in its place.
"""
