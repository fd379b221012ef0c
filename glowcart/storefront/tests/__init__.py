"""
Unit tests for the storefront app.

Test structure:
- test_filters.py: Sidebar filter engine
- test_cart.py: Cart store, order summary and cart views
- test_checkout.py: Checkout coordinator and checkout views
- test_api.py: Shop API client and payload validation
- test_geolocation.py: Delivery coordinate providers
- test_auth.py: Session auth, login/logout/profile views
- test_catalog.py: Product search, product cache, home/search views
"""
