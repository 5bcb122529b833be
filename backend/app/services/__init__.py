# Services package init
"""
LocalBiz Directory — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database.
How:   Stateless singletons; each call receives the request's AsyncSession
       and, for protected operations, the caller's Identity.

Service Inventory:
    - UserService:     register, login, profile
    - CategoryService: list, name lookup, startup seed
    - BusinessService: listing CRUD with ownership checks
    - ReviewService:   review CRUD with ownership checks
    - ordering:        sortBy/order query parameters → ORDER BY
"""
