# Routes package init
"""
LocalBiz Directory — API Routes Package
=========================================

Route Inventory (all under API_PREFIX, default /api, except health):
    - users.py:       POST /users/register, POST /users/login, GET /users/profile
    - businesses.py:  GET/POST /businesses, GET/PUT/DELETE /businesses/{id},
                      GET /businesses/admin/my-businesses
    - reviews.py:     GET /reviews/all, GET/POST /reviews/{businessId},
                      PUT/DELETE /reviews/{id}
    - categories.py:  GET /categories
    - health.py:      GET /health

Routes stay thin: pull parameters out of the request, resolve the caller
through the gates in app.security.gates, call a service, return its schema.
"""
