"""Properties app package.

Listings published by hosts: the property model, listing filters and the
search result cache. The per-property booking list for hosts is exposed
here as well, backed by the bookings application layer.
"""
